# Database models
from .user import User, UserRole
from .event import Event, EventTemplate
from .registration import EventRegistration
from .survey import Survey, NetPromoterBucket, RATING_COLUMNS
from .milestone import Milestone, ParticipantMilestone
from .program import Program, ProgramEnrollment, EnrollmentStatus
from .donation import Donation
