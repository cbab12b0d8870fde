"""Milestone catalog and donation total backfill

Revision ID: 0002_milestone_catalog_and_totals
Revises: 0001_participant_schema
Create Date: 2025-11-02 10:40:05.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0002_milestone_catalog_and_totals'
down_revision = '0001_participant_schema'
branch_labels = None
depends_on = None

MILESTONES = (
    ("Apprenticeship", "Secured an apprenticeship position"),
    ("Bachelor's Degree", "Earned a Bachelor's degree"),
    ("Certificates & Awards", "Received certificates and awards"),
    ("Middle School Diploma", "Completed middle school education"),
    ("Internship", "Secured an internship position"),
    ("Project", "Completed a significant project"),
    ("Master's Degree", "Earned a Master's degree"),
    ("Associate's Degree", "Earned an Associate's degree"),
    ("Career", "Started a full-time career"),
    ("High School Diploma", "Completed high school education"),
)


def upgrade() -> None:
    insert = sa.text(
        "INSERT INTO milestones (title, description, category) "
        "VALUES (:title, :description, :title) "
        "ON CONFLICT (title) DO NOTHING"
    )
    for title, description in MILESTONES:
        op.execute(insert.bindparams(title=title, description=description))

    # Totals written by the old trigger can be stale after reassignments and deletes
    op.execute("""
        UPDATE users u
        SET total_donations = COALESCE(
            (SELECT SUM(d.amount) FROM donations d WHERE d.user_id = u.id), 0
        )
    """)


def downgrade() -> None:
    delete = sa.text(
        "DELETE FROM milestones m WHERE m.title = :title "
        "AND NOT EXISTS (SELECT 1 FROM participant_milestones pm WHERE pm.milestone_id = m.id)"
    )
    for title, _ in MILESTONES:
        op.execute(delete.bindparams(title=title))
