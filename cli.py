import logging
import click
from werkzeug.security import generate_password_hash
from database import db
from marketplace import add_user_skills, set_job_skills, set_user_location
from matching import refresh_matches
from models import User, UserType, Job, JobStatus
from scheduler import purge_read_notifications

logger = logging.getLogger(__name__)

SEED_COMPANIES = [
    ('ops@sunpulse.example', 'SunPulse Energy', 'Pune'),
    ('talent@origin-retreats.example', 'Origin Retreats', 'Bengaluru'),
]

SEED_CANDIDATES = [
    ('amina@workers.example', 'Amina Yusuf', 'Pune', ['Electrical', 'Construction'], 6),
    ('kwame@workers.example', 'Kwame Boateng', 'Mumbai', ['Construction', 'Logistics'], 9),
    ('lindiwe@workers.example', 'Lindiwe Ndlovu', 'Bengaluru', ['Hospitality', 'Catering'], 8),
]

SEED_JOBS = [
    ('ops@sunpulse.example', 'Mini-grid rollout technician',
     'Deploy modular solar kits across rural Maharashtra with rapid QA cycles.',
     12000, ['Electrical', 'Construction']),
    ('talent@origin-retreats.example', 'Hospitality launch crew',
     'Lead service blueprinting for a boutique eco-lodge experience.',
     8000, ['Hospitality', 'Catering']),
]

def ensure_user(email, name, user_type, city, password=None):
    user = User.query.filter_by(email=email).first()
    if user:
        return user, False

    user = User(
        name=name,
        email=email,
        user_type=user_type,
        password_hash=generate_password_hash(password) if password else None
    )
    db.session.add(user)
    db.session.flush()
    set_user_location(user, city)
    return user, True

def seed_demo_data(password=None):
    """Insert demo companies, candidates and jobs; existing rows are left alone.

    Returns the number of users created.
    """
    created = 0
    companies = {}

    for email, name, city in SEED_COMPANIES:
        user, is_new = ensure_user(email, name, UserType.SME, city, password)
        companies[email] = user
        created += int(is_new)

    for email, name, city, skills, years in SEED_CANDIDATES:
        user, is_new = ensure_user(email, name, UserType.CANDIDATE, city, password)
        if is_new:
            add_user_skills(user, skills, years)
        created += int(is_new)

    # Jobs are seeded only into an empty jobs table
    if not Job.query.count():
        for email, title, description, salary, skills in SEED_JOBS:
            job = Job(sme_id=companies[email].id, job_title=title, job_description=description,
                      salary=salary, status=JobStatus.OPEN)
            db.session.add(job)
            db.session.flush()
            set_job_skills(job, skills)

    db.session.commit()
    logger.info(f"Seed complete: {created} users created")
    return created

def register_commands(app):
    @app.cli.command('init-db')
    def init_db_command():
        """Create all database tables."""
        db.create_all()
        click.echo('Database initialized.')

    @app.cli.command('seed')
    @click.option('--password', default=None,
                  help='Password for the seeded accounts. Without it they cannot log in.')
    def seed_command(password):
        """Load demo companies, candidates and jobs."""
        created = seed_demo_data(password)
        click.echo(f"Seed complete. {created} users created.")

    @app.cli.command('refresh-matches')
    @click.option('--no-notify', is_flag=True, help='Do not notify candidates about new matches.')
    def refresh_matches_command(no_notify):
        """Recompute candidate/job matches."""
        count = refresh_matches(notify_new=not no_notify)
        click.echo(f"Stored {count} matches.")

    @app.cli.command('cleanup-notifications')
    @click.option('--days', type=int, default=None,
                  help='Retention in days (defaults to NOTIFICATION_RETENTION_DAYS).')
    def cleanup_notifications_command(days):
        """Delete old read notifications."""
        if days is None:
            days = app.config['NOTIFICATION_RETENTION_DAYS']
        count = purge_read_notifications(days)
        click.echo(f"Deleted {count} notifications.")
