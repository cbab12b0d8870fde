from itertools import chain

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey, Index, DDL, event
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Session
from app.core.exceptions import UnmanagedDonationWrite
from app.database.database import Base

# Session.info flag set by app.services.donations while it owns the write
MANAGED_WRITE_KEY = "managed_donation_write"


class Donation(Base):
    """A monetary contribution.

    Rows are written only through app.services.donations, which keeps
    ``users.total_donations`` in step inside the same transaction.
    """
    __tablename__ = "donations"
    __table_args__ = (
        Index("idx_donations_user", "user_id"),
    )

    id = Column(Integer, primary_key=True)
    # Nullable: anonymous gifts, and donations outlive a deleted account
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    donation_number = Column(Integer, nullable=True)
    donor_name = Column(String(255), nullable=True)
    donor_email = Column(String(255), nullable=True)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    # Real-world contribution date, distinct from created_at for backfilled imports
    donation_date = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="donations")


@event.listens_for(Session, "before_flush")
def reject_unmanaged_donation_writes(session, flush_context, instances):
    if session.info.get(MANAGED_WRITE_KEY):
        return
    for obj in chain(session.new, session.dirty, session.deleted):
        if not isinstance(obj, Donation):
            continue
        if obj in session.dirty and not session.is_modified(obj):
            continue
        raise UnmanagedDonationWrite(
            "Donation rows must be written through record_donation, amend_donation or remove_donation"
        )


@event.listens_for(Session, "do_orm_execute")
def reject_unmanaged_donation_statements(orm_execute_state):
    """Same rule for session.execute(insert/update/delete(Donation)), which skips the flush."""
    if not (orm_execute_state.is_insert or orm_execute_state.is_update or orm_execute_state.is_delete):
        return
    if orm_execute_state.session.info.get(MANAGED_WRITE_KEY):
        return
    table = getattr(orm_execute_state.statement, "table", None)
    if getattr(table, "name", None) == Donation.__tablename__:
        raise UnmanagedDonationWrite(
            "Bulk donation statements bypass the donation total maintainer; "
            "use record_donation, amend_donation or remove_donation"
        )


# PostgreSQL backstop for raw SQL that never reaches a Session. Recomputes
# the old and the new owner, locking them in ascending id order.
TOTALS_TRIGGER_FUNCTION = DDL("""
CREATE OR REPLACE FUNCTION update_user_total_donations() RETURNS TRIGGER AS $$
DECLARE
    affected INTEGER[];
BEGIN
    IF TG_OP = 'INSERT' THEN
        affected := ARRAY[NEW.user_id];
    ELSIF TG_OP = 'DELETE' THEN
        affected := ARRAY[OLD.user_id];
    ELSE
        affected := ARRAY[OLD.user_id, NEW.user_id];
    END IF;

    PERFORM 1 FROM users WHERE id = ANY(affected) ORDER BY id FOR NO KEY UPDATE;
    UPDATE users u
    SET total_donations = COALESCE(
        (SELECT SUM(d.amount) FROM donations d WHERE d.user_id = u.id), 0
    )
    WHERE u.id = ANY(affected);
    RETURN NULL;
END;
$$ LANGUAGE plpgsql
""")

TOTALS_TRIGGER = DDL("""
DROP TRIGGER IF EXISTS trigger_update_total_donations ON donations;
CREATE TRIGGER trigger_update_total_donations
    AFTER INSERT OR UPDATE OR DELETE ON donations
    FOR EACH ROW EXECUTE FUNCTION update_user_total_donations()
""")

event.listen(Donation.__table__, "after_create", TOTALS_TRIGGER_FUNCTION.execute_if(dialect="postgresql"))
event.listen(Donation.__table__, "after_create", TOTALS_TRIGGER.execute_if(dialect="postgresql"))
