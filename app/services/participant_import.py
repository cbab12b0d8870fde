"""
Imports from the legacy CSV exports: participants, then their donations.

The participants CSV's TotalDonations column is read but never written:
users.total_donations belongs to the donation totals maintainer and starts at
zero for imported accounts. Historical donations are replayed through
record_donation, which builds the totals from the imported rows.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Union

import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ParticipantDataError
from app.core.security import hash_password, is_bcrypt_hash
from app.models.user import UserRole
from app.models.donation import Donation
from app.services.donations import record_donation
from app.services.users import create_user, get_user_by_email, normalize_email

logger = logging.getLogger(__name__)

COLUMN_MAPPING = {
    "ParticipantEmail": "email",
    "ParticipantFirstName": "first_name",
    "ParticipantLastName": "last_name",
    "ParticipantDOB": "date_of_birth",
    "ParticipantRole": "role",
    "ParticipantPassword": "password",
    "ParticipantPhone": "phone",
    "ParticipantCity": "city",
    "ParticipantState": "state",
    "ParticipantZip": "zip",
    "ParticipantSchoolOrEmployer": "school_or_employer",
    "ParticipantFieldOfInterest": "field_of_interest",
}

PROFILE_COLUMNS = ("phone", "city", "state", "zip", "school_or_employer", "field_of_interest")

DONATION_COLUMN_MAPPING = {
    "ParticipantEmail": "email",
    "DonationDate": "donation_date",
    "DonationAmount": "amount",
    "DonationNumber": "donation_number",
}


@dataclass
class ImportReport:
    rows: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    dry_run: bool = False
    errors: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Union[int, bool]]:
        return {
            "rows": self.rows,
            "imported": self.imported,
            "skipped": self.skipped,
            "failed": self.failed,
            "dry_run": self.dry_run,
        }


def _load_csv(source, mapping: Dict[str, str]) -> pd.DataFrame:
    """Read the CSV as strings, strip header whitespace and BOM, rename columns."""
    df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    df.columns = [c.strip().lstrip("\ufeff") for c in df.columns]
    df = df.rename(columns=mapping)
    df = df.apply(lambda col: col.str.strip())
    return df


def load_participants_csv(source) -> pd.DataFrame:
    return _load_csv(source, COLUMN_MAPPING)


def load_donations_csv(source) -> pd.DataFrame:
    return _load_csv(source, DONATION_COLUMN_MAPPING)


def _clean(value) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _row_to_user(row: pd.Series) -> Dict:
    """Map one CSV row onto create_user keyword arguments."""
    first = _clean(row.get("first_name")) or ""
    last = _clean(row.get("last_name")) or ""

    dob = None
    raw_dob = _clean(row.get("date_of_birth"))
    if raw_dob:
        parsed = pd.to_datetime(raw_dob, errors="coerce")
        if not pd.isna(parsed):
            dob = parsed.date()

    password = _clean(row.get("password"))
    if password is None:
        raise ValueError("no password")
    password_hash = password if is_bcrypt_hash(password) else hash_password(password)

    role = (_clean(row.get("role")) or UserRole.PARTICIPANT.value).lower()

    user = {
        "email": normalize_email(row["email"]),
        "name": f"{first} {last}".strip(),
        "password_hash": password_hash,
        "role": role,
        "date_of_birth": dob,
    }
    for column in PROFILE_COLUMNS:
        value = _clean(row.get(column))
        if value is not None:
            user[column] = value
    return user


def import_participants(db: Session, source, dry_run: bool = False) -> ImportReport:
    """
    Import participants from a CSV path or file-like object.

    Rows without an email, or whose email already exists (in the database or
    earlier in the file), are skipped. A row the database rejects is counted
    as failed and the import continues with the next row.
    """
    df = load_participants_csv(source)
    report = ImportReport(rows=len(df), dry_run=dry_run)
    seen = set()

    for index, row in df.iterrows():
        line = index + 2  # header is line 1
        email = _clean(row.get("email"))
        if not email:
            report.skipped += 1
            logger.warning(f"Row {line}: skipping, no email")
            continue

        email = normalize_email(email)
        if email in seen or get_user_by_email(db, email):
            report.skipped += 1
            logger.info(f"Row {line}: {email} already exists, skipping")
            continue
        seen.add(email)

        try:
            user = _row_to_user(row)
            if dry_run:
                logger.info(f"Row {line}: would import {email}")
            else:
                create_user(db, **user)
            report.imported += 1
        except (ValueError, ParticipantDataError) as e:
            report.failed += 1
            report.errors.append(f"Row {line} ({email}): {e}")
            logger.error(f"Row {line}: failed to import {email}: {e}")

    logger.info(f"Participant import finished: {report.as_dict()}")
    return report


def _parse_amount(raw) -> Decimal:
    cleaned = (_clean(raw) or "").replace("$", "").replace(",", "")
    if not cleaned:
        raise ValueError("no amount")
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"bad amount {raw!r}") from e


def _parse_date(raw) -> Optional[datetime]:
    value = _clean(raw)
    if value is None:
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        raise ValueError(f"bad date {raw!r}")
    return parsed.to_pydatetime()


def _already_imported(db: Session, user_id, amount: Decimal, donation_date, donation_number) -> bool:
    query = select(Donation.id).where(
        Donation.user_id.is_(None) if user_id is None else Donation.user_id == user_id,
        Donation.amount == amount,
        Donation.donation_date.is_(None) if donation_date is None else Donation.donation_date == donation_date,
        Donation.donation_number.is_(None) if donation_number is None else Donation.donation_number == donation_number,
    )
    return db.execute(query.limit(1)).first() is not None


def import_donations(db: Session, source, dry_run: bool = False) -> ImportReport:
    """
    Backfill historical donations from the donations CSV.

    Each row is written with record_donation, so every donor's total is
    recomputed as the rows land. ParticipantEmail is resolved to a user; an
    unknown or blank email keeps the donation as an anonymous gift with the
    email stored on the row. A row matching an existing donation (same user,
    amount, date and number) is skipped, so re-running the import is safe.
    """
    df = load_donations_csv(source)
    report = ImportReport(rows=len(df), dry_run=dry_run)
    users: Dict[str, Optional[int]] = {}

    for index, row in df.iterrows():
        line = index + 2
        try:
            amount = _parse_amount(row.get("amount"))
            donation_date = _parse_date(row.get("donation_date"))
            raw_number = _clean(row.get("donation_number"))
            donation_number = int(float(raw_number)) if raw_number else None
        except ValueError as e:
            report.failed += 1
            report.errors.append(f"Row {line}: {e}")
            logger.error(f"Row {line}: cannot read donation: {e}")
            continue

        email = _clean(row.get("email"))
        email = normalize_email(email) if email else None
        user = None
        if email:
            if email not in users:
                found = get_user_by_email(db, email)
                users[email] = found.id if found else None
                if found is None:
                    logger.warning(f"Row {line}: no participant {email}, importing as anonymous")
            user = users[email]

        if _already_imported(db, user, amount, donation_date, donation_number):
            report.skipped += 1
            logger.info(f"Row {line}: donation already imported, skipping")
            continue

        if dry_run:
            logger.info(f"Row {line}: would import {amount} for {email or 'anonymous'}")
            report.imported += 1
            continue

        try:
            record_donation(
                db,
                amount=amount,
                user_id=user,
                donor_email=None if user else email,
                donation_date=donation_date,
                donation_number=donation_number,
            )
            report.imported += 1
        except ParticipantDataError as e:
            report.failed += 1
            report.errors.append(f"Row {line}: {e}")
            logger.error(f"Row {line}: failed to import donation: {e}")

    logger.info(f"Donation import finished: {report.as_dict()}")
    return report
