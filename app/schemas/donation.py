from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class DonationCreate(BaseModel):
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)
    user_id: Optional[int] = None
    donation_number: Optional[int] = None
    donor_name: Optional[str] = None
    donor_email: Optional[EmailStr] = None
    message: Optional[str] = None
    donation_date: Optional[datetime] = None


class DonationUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    user_id: Optional[int] = None
    donation_number: Optional[int] = None
    donor_name: Optional[str] = None
    donor_email: Optional[EmailStr] = None
    message: Optional[str] = None
    donation_date: Optional[datetime] = None


class DonationResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    amount: Decimal
    donation_number: Optional[int] = None
    donor_name: Optional[str] = None
    donor_email: Optional[str] = None
    message: Optional[str] = None
    donation_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DonationSummary(BaseModel):
    count: int
    total_amount: Decimal
    anonymous_count: int


class TotalMismatch(BaseModel):
    user_id: int
    stored_total: Decimal
    actual_total: Decimal
