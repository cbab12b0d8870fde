"""Corrected donation totals trigger

Revision ID: 0003_donation_totals_trigger
Revises: 0002_milestone_catalog_and_totals
Create Date: 2025-11-20 09:05:12.000000

"""
from alembic import op


# revision identifiers, used by Alembic.
revision = '0003_donation_totals_trigger'
down_revision = '0002_milestone_catalog_and_totals'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # The donation service recomputes totals itself; the trigger covers raw
    # SQL (imports, manual fixes) and, unlike the old one, recomputes both the
    # previous and the new owner.
    op.execute("""
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
    op.execute("DROP TRIGGER IF EXISTS trigger_update_total_donations ON donations")
    op.execute("""
        CREATE TRIGGER trigger_update_total_donations
            AFTER INSERT OR UPDATE OR DELETE ON donations
            FOR EACH ROW EXECUTE FUNCTION update_user_total_donations()
    """)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trigger_update_total_donations ON donations")
    op.execute("DROP FUNCTION IF EXISTS update_user_total_donations()")
