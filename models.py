from datetime import datetime
from database import db
from flask_login import UserMixin
from sqlalchemy import Enum
import enum

class UserType(enum.Enum):
    SME = "SME"
    CANDIDATE = "CANDIDATE"

class JobStatus(enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"

class ApplicationStatus(enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

class RecruitmentStatus(enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

class NotificationType(enum.Enum):
    APPLICATION_UPDATE = "APPLICATION_UPDATE"
    RECRUITMENT_REQUEST = "RECRUITMENT_REQUEST"
    MATCH = "MATCH"

# Statuses that still bind a candidate to a company
ACTIVE_APPLICATION_STATUSES = (ApplicationStatus.PENDING, ApplicationStatus.ACCEPTED)
ACTIVE_RECRUITMENT_STATUSES = (RecruitmentStatus.PENDING, RecruitmentStatus.ACCEPTED)

class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256))  # seeded accounts may have none
    phone = db.Column(db.String(20))
    bio = db.Column(db.Text)
    user_type = db.Column(Enum(UserType), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    locations = db.relationship('UserLocation', backref='user', lazy=True, cascade='all, delete-orphan',
                                order_by=lambda: (UserLocation.created_at.desc(), UserLocation.id.desc()))
    skills = db.relationship('UserSkill', backref='user', lazy=True, cascade='all, delete-orphan')

    @property
    def is_sme(self):
        return self.user_type == UserType.SME

    @property
    def is_candidate(self):
        return self.user_type == UserType.CANDIDATE

    @property
    def current_location(self):
        """Most recently created location, or None"""
        return self.locations[0] if self.locations else None

    @property
    def skill_names(self):
        return [us.skill.skill_name for us in self.skills]

class UserLocation(db.Model):
    __tablename__ = 'user_locations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    address = db.Column(db.String(255))
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None

class Skill(db.Model):
    __tablename__ = 'skills'

    id = db.Column(db.Integer, primary_key=True)
    skill_name = db.Column(db.String(100), unique=True, nullable=False)

class UserSkill(db.Model):
    __tablename__ = 'user_skills'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), primary_key=True)
    skill_id = db.Column(db.Integer, db.ForeignKey('skills.id'), primary_key=True)
    experience_years = db.Column(db.Integer)

    skill = db.relationship('Skill', lazy='joined')

class Job(db.Model):
    __tablename__ = 'sme_jobs'

    id = db.Column(db.Integer, primary_key=True)
    sme_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    job_title = db.Column(db.String(200))
    job_description = db.Column(db.Text)
    salary = db.Column(db.Float)
    status = db.Column(Enum(JobStatus), default=JobStatus.OPEN, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    sme = db.relationship('User', lazy='joined')
    skills = db.relationship('JobSkill', backref='job', lazy=True, cascade='all, delete-orphan')
    applications = db.relationship('JobApplication', backref='job', lazy=True, cascade='all, delete-orphan')

    @property
    def skill_names(self):
        return [js.skill.skill_name for js in self.skills]

class JobSkill(db.Model):
    __tablename__ = 'job_skills'

    job_id = db.Column(db.Integer, db.ForeignKey('sme_jobs.id'), primary_key=True)
    skill_id = db.Column(db.Integer, db.ForeignKey('skills.id'), primary_key=True)

    skill = db.relationship('Skill', lazy='joined')

class JobApplication(db.Model):
    __tablename__ = 'job_applications'

    id = db.Column(db.Integer, primary_key=True)
    worker_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    job_id = db.Column(db.Integer, db.ForeignKey('sme_jobs.id'), nullable=False)
    status = db.Column(Enum(ApplicationStatus), default=ApplicationStatus.PENDING, nullable=False)
    cover_letter = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    worker = db.relationship('User', lazy='joined')

    # One application per candidate and job
    __table_args__ = (db.UniqueConstraint('worker_id', 'job_id'),)

class RecruitmentRequest(db.Model):
    __tablename__ = 'recruitment_requests'

    id = db.Column(db.Integer, primary_key=True)
    sme_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    worker_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    status = db.Column(Enum(RecruitmentStatus), default=RecruitmentStatus.PENDING, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sme = db.relationship('User', foreign_keys=[sme_id], lazy='joined')
    worker = db.relationship('User', foreign_keys=[worker_id], lazy='joined')

    __table_args__ = (db.UniqueConstraint('sme_id', 'worker_id'),)

class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    type = db.Column(Enum(NotificationType), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text)
    link = db.Column(db.String(255))
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

class Match(db.Model):
    """Precomputed candidate-to-job pairing, rebuilt by matching.refresh_matches"""
    __tablename__ = 'matches'

    id = db.Column(db.Integer, primary_key=True)
    job_id = db.Column(db.Integer, db.ForeignKey('sme_jobs.id'))
    worker_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    distance_km = db.Column(db.Float)
    score = db.Column(db.Float)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
