"""
Marketplace rules shared by the API routes and the CLI.

Candidates apply to jobs; SMEs send recruitment requests to candidates.
The two paths are mutually exclusive per company: a candidate holding an
active recruitment request from an SME cannot apply to that SME's jobs,
and an SME cannot recruit a candidate with an active application to one
of its jobs. Decisions move PENDING to ACCEPTED or REJECTED exactly once.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from database import db
from locations import find_geo_location_by_city
from models import (User, UserType, UserLocation, Skill, UserSkill, Job, JobSkill, JobStatus,
                    JobApplication, ApplicationStatus, RecruitmentRequest, RecruitmentStatus,
                    Notification, NotificationType, ACTIVE_APPLICATION_STATUSES,
                    ACTIVE_RECRUITMENT_STATUSES)

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """A business rule rejected the request"""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(MarketplaceError):
    status_code = 404


class ForbiddenError(MarketplaceError):
    status_code = 403


def parse_decision(status, enum_cls):
    """Only ACCEPTED and REJECTED are valid decisions"""
    if status not in ('ACCEPTED', 'REJECTED'):
        raise MarketplaceError('Invalid status. Must be ACCEPTED or REJECTED')
    return enum_cls(status)


# Users, skills and locations

def find_user_by_email(email) -> Optional[User]:
    """Emails compare case-insensitively"""
    return User.query.filter(func.lower(User.email) == str(email).strip().lower()).first()


def register_user(name, email, password, user_type: UserType, phone=None, bio=None) -> User:
    if find_user_by_email(email):
        raise MarketplaceError('User with this email already exists')

    user = User(
        name=name,
        email=email,
        password_hash=generate_password_hash(password),
        phone=phone or None,
        bio=bio or None,
        user_type=user_type,
    )
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError:
        # Another request registered the same email first
        db.session.rollback()
        raise MarketplaceError('User with this email already exists')
    logger.info(f"Registered {user_type.value} account {user.id} ({email})")
    return user


def get_or_create_skill(name: str) -> Skill:
    skill = Skill.query.filter(func.lower(Skill.skill_name) == name.lower()).first()
    if not skill:
        skill = Skill(skill_name=name)
        db.session.add(skill)
        db.session.flush()
    return skill


def add_user_skills(user: User, names: Iterable[str], experience_years: Optional[int] = None):
    existing = {us.skill_id for us in user.skills}
    for name in names:
        skill = get_or_create_skill(name)
        if skill.id in existing:
            continue
        user.skills.append(UserSkill(skill=skill, experience_years=experience_years))
        existing.add(skill.id)


def replace_user_skills(user: User, names: Iterable[str], experience_years: Optional[int] = None):
    user.skills.clear()
    db.session.flush()
    add_user_skills(user, names, experience_years)


def set_job_skills(job: Job, names: Iterable[str]):
    linked = {js.skill_id for js in job.skills}
    for name in names:
        skill = get_or_create_skill(name)
        if skill.id not in linked:
            job.skills.append(JobSkill(skill=skill))
            linked.add(skill.id)


def set_user_location(user: User, address: str, latitude=None, longitude=None) -> UserLocation:
    """Update the user's current location or create one.

    Without explicit coordinates the address is geocoded through the city
    catalogue; unknown cities keep null coordinates.
    """
    if latitude is None or longitude is None:
        geo = find_geo_location_by_city(address)
        if geo:
            latitude, longitude = geo['latitude'], geo['longitude']

    location = user.current_location
    if location:
        location.address = address
        location.latitude = latitude
        location.longitude = longitude
    else:
        location = UserLocation(address=address, latitude=latitude, longitude=longitude)
        user.locations.append(location)
    db.session.flush()
    return location


def notify(user_id: int, type_: NotificationType, title: str, message: str, link: Optional[str] = None):
    notification = Notification(user_id=user_id, type=type_, title=title, message=message, link=link)
    db.session.add(notification)
    return notification


def get_candidate(user_id: Optional[int]) -> Optional[User]:
    if not user_id:
        return None
    return User.query.filter_by(id=user_id, user_type=UserType.CANDIDATE).first()


# Applications

def find_active_recruitment(sme_id: int, worker_id: int) -> Optional[RecruitmentRequest]:
    return RecruitmentRequest.query.filter(
        RecruitmentRequest.sme_id == sme_id,
        RecruitmentRequest.worker_id == worker_id,
        RecruitmentRequest.status.in_(ACTIVE_RECRUITMENT_STATUSES)
    ).first()


def find_active_application_with_company(worker_id: int, sme_id: int) -> Optional[JobApplication]:
    return JobApplication.query.join(Job, JobApplication.job_id == Job.id).filter(
        JobApplication.worker_id == worker_id,
        Job.sme_id == sme_id,
        JobApplication.status.in_(ACTIVE_APPLICATION_STATUSES)
    ).first()


def check_apply_eligibility(worker: User, job_id: int) -> dict:
    job = db.session.get(Job, job_id)
    if not job or job.status != JobStatus.OPEN:
        return {
            'canApply': False,
            'reason': 'Job is not available',
            'hasActiveRecruitment': False,
            'hasApplicationForJob': False,
        }

    existing = JobApplication.query.filter_by(worker_id=worker.id, job_id=job.id).first()
    has_application = existing is not None
    has_recruitment = find_active_recruitment(job.sme_id, worker.id) is not None

    reason = None
    if has_application:
        reason = 'You have already applied for this job.'
    elif has_recruitment:
        reason = 'You already have a recruitment offer from this company.'

    return {
        'canApply': reason is None,
        'reason': reason,
        'hasActiveRecruitment': has_recruitment,
        'hasApplicationForJob': has_application,
    }


def apply_to_job(worker: User, job_id: int, cover_letter: Optional[str] = None) -> JobApplication:
    job = Job.query.filter_by(id=job_id, status=JobStatus.OPEN).first()
    if not job:
        raise NotFoundError('Job not found or not available')

    if JobApplication.query.filter_by(worker_id=worker.id, job_id=job.id).first():
        raise MarketplaceError('You have already applied for this job')

    if find_active_recruitment(job.sme_id, worker.id):
        raise MarketplaceError('You already have a recruitment offer from this company. '
                               'Please respond to that offer instead of applying for this job.')

    application = JobApplication(
        worker_id=worker.id,
        job_id=job.id,
        status=ApplicationStatus.PENDING,
        cover_letter=cover_letter or None
    )
    db.session.add(application)
    notify(
        job.sme_id,
        NotificationType.APPLICATION_UPDATE,
        'New Job Application',
        f"{worker.name} applied for your job posting",
        f"/sme/applications?job_id={job.id}"
    )

    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race against a concurrent application for the same job
        db.session.rollback()
        raise MarketplaceError('You have already applied for this job')

    logger.info(f"Candidate {worker.id} applied to job {job.id}")
    return application


def decide_application(sme: User, application_id: int, status) -> JobApplication:
    new_status = parse_decision(status, ApplicationStatus)

    application = db.session.get(JobApplication, application_id)
    if not application:
        raise NotFoundError('Application not found')
    if application.job.sme_id != sme.id:
        raise ForbiddenError('Unauthorized to update this application')
    if application.status != ApplicationStatus.PENDING:
        raise MarketplaceError(f"Application has already been {application.status.value.lower()}")

    application.status = new_status
    verb = new_status.value.lower()
    notify(
        application.worker_id,
        NotificationType.APPLICATION_UPDATE,
        f"Application {new_status.value}",
        f'Your application for "{application.job.job_title or "Job"}" at {sme.name} has been {verb}',
        '/applications'
    )
    db.session.commit()

    logger.info(f"SME {sme.id} {verb} application {application.id}")
    return application


# Recruitment requests

def send_recruitment_request(sme: User, worker_id: int):
    """Returns (request, created)"""
    worker = get_candidate(worker_id)
    if not worker:
        raise NotFoundError('Worker not found')

    existing = RecruitmentRequest.query.filter_by(sme_id=sme.id, worker_id=worker.id).first()
    if existing:
        return existing, False

    if find_active_application_with_company(worker.id, sme.id):
        raise MarketplaceError('This candidate has already applied to one of your jobs. '
                               'Please review their application instead.')

    request = RecruitmentRequest(sme_id=sme.id, worker_id=worker.id, status=RecruitmentStatus.PENDING)
    db.session.add(request)
    notify(
        worker.id,
        NotificationType.RECRUITMENT_REQUEST,
        'Recruitment Request',
        f"{sme.name or 'A company'} has sent you a recruitment request",
        '/worker/recruitments'
    )

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        existing = RecruitmentRequest.query.filter_by(sme_id=sme.id, worker_id=worker.id).first()
        if existing is None:
            raise
        return existing, False

    logger.info(f"SME {sme.id} sent recruitment request {request.id} to candidate {worker.id}")
    return request, True


def recruitment_status(sme: User, worker_id: int) -> dict:
    request = RecruitmentRequest.query.filter_by(sme_id=sme.id, worker_id=worker_id).first()
    has_application = find_active_application_with_company(worker_id, sme.id) is not None
    return {
        'hasRequest': request is not None,
        'status': request.status.value if request else None,
        'request_id': request.id if request else None,
        'hasApplication': has_application,
        'canRecruit': request is None and not has_application,
    }


def respond_to_recruitment(worker: User, request_id: int, status) -> RecruitmentRequest:
    new_status = parse_decision(status, RecruitmentStatus)

    request = RecruitmentRequest.query.filter_by(id=request_id, worker_id=worker.id).first()
    if not request:
        raise NotFoundError('Recruitment request not found')
    if request.status != RecruitmentStatus.PENDING:
        raise MarketplaceError(f"Recruitment request has already been {request.status.value.lower()}")

    request.status = new_status
    verb = new_status.value.lower()
    notify(
        request.sme_id,
        NotificationType.APPLICATION_UPDATE,
        'Recruitment Response',
        f"{worker.name} has {verb} your recruitment request",
        '/sme/dashboard'
    )
    db.session.commit()

    logger.info(f"Candidate {worker.id} {verb} recruitment request {request.id}")
    return request
