"""Participant, event, survey, program and donation schema

Revision ID: 0001_participant_schema
Revises:
Create Date: 2025-11-02 10:12:40.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_participant_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Tables are created in dependency order; IF NOT EXISTS keeps this
    # idempotent against databases bootstrapped by hand.
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            email VARCHAR(255) NOT NULL UNIQUE,
            name VARCHAR(255) NOT NULL,
            password_hash VARCHAR(255) NOT NULL,
            role VARCHAR(50) NOT NULL DEFAULT 'participant'
                CONSTRAINT ck_users_role CHECK (role IN ('participant', 'admin')),
            date_of_birth DATE,
            phone VARCHAR(20),
            city VARCHAR(100),
            state VARCHAR(2),
            zip VARCHAR(10),
            school_or_employer VARCHAR(255),
            field_of_interest VARCHAR(100),
            total_donations NUMERIC(10, 2) NOT NULL DEFAULT 0,
            login_count INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
        CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS event_templates (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            type VARCHAR(100),
            description TEXT,
            recurrence_pattern VARCHAR(50),
            default_capacity INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS events (
            id SERIAL PRIMARY KEY,
            event_template_id INTEGER REFERENCES event_templates(id) ON DELETE SET NULL,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            start_time TIMESTAMP NOT NULL,
            end_time TIMESTAMP,
            location VARCHAR(255),
            capacity INTEGER,
            registration_deadline TIMESTAMP,
            image_url VARCHAR(500),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX IF NOT EXISTS idx_events_start_time ON events(start_time);

        CREATE TABLE IF NOT EXISTS event_registrations (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
            event_id INTEGER REFERENCES events(id) ON DELETE CASCADE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_event_registrations_user_event UNIQUE (user_id, event_id)
        );
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS surveys (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
            event_id INTEGER REFERENCES events(id) ON DELETE CASCADE,
            registration_id INTEGER REFERENCES event_registrations(id) ON DELETE CASCADE,
            satisfaction_rating INTEGER
                CONSTRAINT ck_surveys_satisfaction_rating CHECK (satisfaction_rating BETWEEN 1 AND 5),
            usefulness_rating INTEGER
                CONSTRAINT ck_surveys_usefulness_rating CHECK (usefulness_rating BETWEEN 1 AND 5),
            instructor_rating INTEGER
                CONSTRAINT ck_surveys_instructor_rating CHECK (instructor_rating BETWEEN 1 AND 5),
            recommendation_rating INTEGER
                CONSTRAINT ck_surveys_recommendation_rating CHECK (recommendation_rating BETWEEN 1 AND 5),
            overall_score NUMERIC(3, 2),
            net_promoter_score VARCHAR(20)
                CONSTRAINT ck_surveys_net_promoter_score
                CHECK (net_promoter_score IN ('Promoter', 'Passive', 'Detractor')),
            additional_feedback TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX IF NOT EXISTS idx_surveys_user ON surveys(user_id);
        CREATE INDEX IF NOT EXISTS idx_surveys_event ON surveys(event_id);
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS milestones (
            id SERIAL PRIMARY KEY,
            title VARCHAR(255) NOT NULL UNIQUE,
            description TEXT,
            category VARCHAR(100),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS participant_milestones (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
            milestone_id INTEGER REFERENCES milestones(id) ON DELETE CASCADE,
            custom_title VARCHAR(255),
            achieved_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS programs (
            id SERIAL PRIMARY KEY,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            age_range VARCHAR(100),
            schedule VARCHAR(255),
            fee NUMERIC(10, 2),
            additional_info TEXT,
            image_url VARCHAR(500),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS program_enrollments (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
            program_id INTEGER REFERENCES programs(id) ON DELETE CASCADE,
            enrolled_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            status VARCHAR(50) DEFAULT 'active',
            CONSTRAINT uq_program_enrollments_user_program UNIQUE (user_id, program_id)
        );
    """)

    # users.total_donations is kept by the donation service; 0003 adds the trigger
    op.execute("""
        CREATE TABLE IF NOT EXISTS donations (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
            amount NUMERIC(10, 2) NOT NULL,
            donation_number INTEGER,
            donor_name VARCHAR(255),
            donor_email VARCHAR(255),
            message TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            donation_date TIMESTAMP NULL
        );
        CREATE INDEX IF NOT EXISTS idx_donations_user ON donations(user_id);
    """)

    # Databases bootstrapped from the old SQL script carry a trigger that only
    # recomputed the new owner; 0003 replaces it
    op.execute("DROP TRIGGER IF EXISTS trigger_update_total_donations ON donations")
    op.execute("DROP FUNCTION IF EXISTS update_user_total_donations() CASCADE")


def downgrade() -> None:
    for table in (
        'donations',
        'program_enrollments',
        'programs',
        'participant_milestones',
        'milestones',
        'surveys',
        'event_registrations',
        'events',
        'event_templates',
        'users',
    ):
        op.drop_table(table)
