"""Program enrollment and milestone tracking."""
from datetime import datetime
from decimal import Decimal

import pytest

from app.core.exceptions import RecordNotFound
from app.models.program import EnrollmentStatus
from app.services import milestones as milestone_service
from app.services import programs as program_service


def test_enroll_and_withdraw(db, user):
    program = program_service.create_program(
        db, title="Mariachi", schedule="Mondays from 5:30 PM - 6:45 PM", fee=Decimal("45.00")
    )
    enrollment = program_service.enroll_in_program(db, user.id, program.id)
    assert enrollment.status == EnrollmentStatus.ACTIVE.value

    withdrawn = program_service.withdraw_from_program(db, user.id, program.id)
    assert withdrawn.status == EnrollmentStatus.WITHDRAWN.value


def test_reenroll_after_withdrawal_reuses_row(db, user):
    program = program_service.create_program(db, title="Ballet Folklorico")
    first = program_service.enroll_in_program(db, user.id, program.id)
    program_service.withdraw_from_program(db, user.id, program.id)

    again = program_service.enroll_in_program(db, user.id, program.id)
    assert again.id == first.id
    assert again.status == EnrollmentStatus.ACTIVE.value


def test_withdraw_without_enrollment(db, user):
    program = program_service.create_program(db, title="Summit + Educational Pathways")
    with pytest.raises(RecordNotFound):
        program_service.withdraw_from_program(db, user.id, program.id)


def test_catalog_is_idempotent(db):
    assert milestone_service.ensure_milestone_catalog(db) == 10
    assert milestone_service.ensure_milestone_catalog(db) == 0

    internship = milestone_service.get_milestone_by_title(db, "Internship")
    assert internship.category == "Internship"
    assert internship.description == "Secured an internship position"


def test_award_and_list(db, user):
    milestone_service.ensure_milestone_catalog(db)
    career = milestone_service.get_milestone_by_title(db, "Career")
    project = milestone_service.get_milestone_by_title(db, "Project")

    milestone_service.award_milestone(db, user.id, career.id, achieved_at=datetime(2024, 6, 1))
    milestone_service.award_milestone(db, user.id, project.id, custom_title="Robotics showcase",
                                      achieved_at=datetime(2025, 2, 1))

    titles = [m.display_title for m in milestone_service.list_user_milestones(db, user.id)]
    assert titles == ["Robotics showcase", "Career"]

    overview = milestone_service.milestone_overview(db)
    assert overview["Career"] == 1
    assert overview["Internship"] == 0


def test_revoke(db, user):
    milestone = milestone_service.create_milestone(db, "Apprenticeship")
    award = milestone_service.award_milestone(db, user.id, milestone.id)
    milestone_service.revoke_milestone(db, award.id)
    assert milestone_service.list_user_milestones(db, user.id) == []
