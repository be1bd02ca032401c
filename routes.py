import math
import logging
from datetime import datetime
from flask import current_app, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy import func, text
from werkzeug.security import check_password_hash, generate_password_hash
from database import db
from auth import sme_required, candidate_required
from locations import GEO_LOCATIONS, find_geo_location_by_city
from marketplace import (MarketplaceError, register_user, find_user_by_email, add_user_skills,
                         replace_user_skills, set_job_skills, set_user_location, get_candidate,
                         check_apply_eligibility, apply_to_job, decide_application,
                         send_recruitment_request, recruitment_status, respond_to_recruitment)
from matching import get_recommendations, haversine_km, refresh_matches
from models import (User, UserType, Skill, UserSkill, Job, JobSkill, JobStatus, JobApplication,
                    ApplicationStatus, RecruitmentRequest, RecruitmentStatus, Notification)
from utils import (validate_email, validate_password, parse_worker_id, parse_int, parse_budget,
                   format_budget, split_skills, average_experience, rating_for, default_bio,
                   format_candidate, format_job, isoformat)

logger = logging.getLogger(__name__)

INVALID_BODY = 'Invalid request format. Please check your input.'
NOTIFICATION_PAGE_SIZE = 50
SME_RECRUITMENT_PAGE_SIZE = 50
SEARCH_TEXT_FIELDS = ('skill', 'location', 'near')

def error_response(message, status_code):
    return jsonify({'success': False, 'error': message}), status_code

def get_json_body():
    """Parsed JSON object body, or None when missing or malformed"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None

def user_payload(user):
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'userType': user.user_type.value,
    }

def notification_payload(n):
    return {
        'id': n.id,
        'type': n.type.value,
        'title': n.title,
        'message': n.message,
        'link': n.link,
        'read': bool(n.read),
        'createdAt': isoformat(n.created_at),
    }

def list_notifications(user):
    notifications = Notification.query.filter_by(user_id=user.id)\
        .order_by(Notification.created_at.desc(), Notification.id.desc())\
        .limit(NOTIFICATION_PAGE_SIZE).all()
    unread_count = Notification.query.filter_by(user_id=user.id, read=False).count()
    return {
        'notifications': [notification_payload(n) for n in notifications],
        'unreadCount': unread_count,
    }

def skill_name_filter(skill):
    return func.lower(Skill.skill_name).like(f"%{skill.lower()}%")

def address_contains(location, needle):
    return bool(location and location.address and needle.lower() in location.address.lower())

def search_candidates(skill=None, location=None, near=None, radius_km=None):
    """Candidate cards filtered by skill, address substring and optional radius around a city"""
    query = User.query.filter_by(user_type=UserType.CANDIDATE)
    if skill:
        query = query.filter(User.skills.any(UserSkill.skill.has(skill_name_filter(skill))))

    candidates = query.order_by(User.id).all()

    if location:
        candidates = [c for c in candidates if address_contains(c.current_location, location)]

    if not near:
        return [format_candidate(c) for c in candidates]

    center = find_geo_location_by_city(near)
    if not center:
        raise MarketplaceError(f"Unknown city: {near}")

    radius = current_app.config['SEARCH_RADIUS_KM']
    if radius_km not in (None, ''):
        try:
            radius = float(radius_km)
        except (TypeError, ValueError):
            raise MarketplaceError('Invalid radius')
        if not math.isfinite(radius) or radius <= 0:
            raise MarketplaceError('Invalid radius')

    nearby = []
    for candidate in candidates:
        loc = candidate.current_location
        if not loc or not loc.has_coordinates:
            continue
        distance = haversine_km(center['latitude'], center['longitude'], loc.latitude, loc.longitude)
        if distance <= radius:
            card = format_candidate(candidate)
            card['distance_km'] = round(distance, 2)
            nearby.append(card)

    nearby.sort(key=lambda card: card['distance_km'])
    return nearby

def register_routes(app):
    # Auth
    @app.route('/api/auth/register-candidate', methods=['POST'])
    @app.route('/api/auth/register-worker', methods=['POST'])
    def api_register_candidate():
        """Create a candidate account and sign it in"""
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        name = data.get('name')
        email = data.get('email')
        password = data.get('password')

        if not name or not email or not password:
            return error_response('Name, email, and password are required', 400)
        if not validate_password(password):
            return error_response('Password must be at least 8 characters long', 400)
        if not validate_email(email):
            return error_response('Invalid email format', 400)

        try:
            user = register_user(name, email, password, UserType.CANDIDATE,
                                 phone=data.get('phone'), bio=data.get('experienceSummary'))

            skills = split_skills(data.get('skillFocus'))
            if skills:
                add_user_skills(user, skills)

            if data.get('city'):
                set_user_location(user, data['city'])

            db.session.commit()
            login_user(user, remember=True)

            return jsonify({
                'success': True,
                'message': 'Worker account created successfully',
                'user': user_payload(user)
            })
        except MarketplaceError as e:
            db.session.rollback()
            return error_response(e.message, e.status_code)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Registration error: {e}")
            return error_response('Failed to create account. Please try again.', 500)

    @app.route('/api/auth/register-sme', methods=['POST'])
    def api_register_sme():
        """Create a company account and sign it in"""
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        company_name = data.get('companyName')
        email = data.get('email')
        password = data.get('password')

        if not company_name or not email or not password:
            return error_response('Company name, email, and password are required', 400)
        if not validate_password(password):
            return error_response('Password must be at least 8 characters long', 400)
        if not validate_email(email):
            return error_response('Invalid email format', 400)

        bio_parts = []
        if data.get('industriesServed'):
            bio_parts.append(f"Industries served: {data['industriesServed']}")
        if data.get('deploymentNeeds'):
            bio_parts.append(f"Deployment needs: {data['deploymentNeeds']}")

        try:
            user = register_user(company_name, email, password, UserType.SME,
                                 phone=data.get('phone'), bio='\n'.join(bio_parts))

            if data.get('hqCity'):
                set_user_location(user, data['hqCity'])

            db.session.commit()
            login_user(user, remember=True)

            return jsonify({
                'success': True,
                'message': 'SME account created successfully',
                'user': user_payload(user)
            })
        except MarketplaceError as e:
            db.session.rollback()
            return error_response(e.message, e.status_code)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Registration error: {e}")
            return error_response('Failed to create account. Please try again.', 500)

    @app.route('/api/auth/login', methods=['POST'])
    def api_login():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        email = data.get('email')
        password = data.get('password')
        if not email or not password:
            return error_response('Email and password are required', 400)

        try:
            user = find_user_by_email(email)
            if not user:
                return error_response('Invalid email or password', 401)

            if not user.password_hash:
                return error_response('Please set a password. Use registration to create an account.', 401)

            if not check_password_hash(user.password_hash, password):
                return error_response('Invalid email or password', 401)

            login_user(user, remember=True)
            return jsonify({'success': True, 'user': user_payload(user)})
        except Exception as e:
            logger.error(f"Login error: {e}")
            return error_response('Failed to login. Please try again later.', 500)

    @app.route('/api/auth/logout', methods=['POST'])
    def api_logout():
        logout_user()
        return jsonify({'success': True})

    @app.route('/api/auth/me', methods=['GET'])
    @login_required
    def api_me():
        payload = user_payload(current_user)
        payload['phone'] = current_user.phone
        return jsonify({'user': payload})

    @app.route('/api/auth/change-password', methods=['POST'])
    @login_required
    def api_change_password():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        current_password = data.get('currentPassword')
        new_password = data.get('newPassword')
        if not current_password or not new_password:
            return error_response('Current and new password are required', 400)
        if not validate_password(new_password):
            return error_response('Password must be at least 8 characters long', 400)

        try:
            if not current_user.password_hash or not check_password_hash(current_user.password_hash, current_password):
                return error_response('Current password is incorrect', 400)

            current_user.password_hash = generate_password_hash(new_password)
            db.session.commit()
            logger.info(f"User {current_user.id} changed password")
            return jsonify({'success': True, 'message': 'Password updated successfully'})
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error changing password: {e}")
            return error_response('Failed to change password', 500)

    # Locations
    @app.route('/api/locations', methods=['GET'])
    def api_locations():
        return jsonify({'locations': GEO_LOCATIONS, 'total': len(GEO_LOCATIONS)})

    # Profiles
    @app.route('/api/candidate/profile', methods=['GET'])
    @app.route('/api/worker/profile', methods=['GET'])
    @candidate_required
    def api_candidate_profile():
        try:
            user = current_user
            location = user.current_location
            skill_names = user.skill_names

            return jsonify({
                'name': user.name,
                'email': user.email,
                'phone': user.phone,
                'city': location.address if location and location.address else '',
                'skills': skill_names,
                'experience': average_experience(user.skills),
                'bio': user.bio or default_bio(skill_names),
                'rating': rating_for(user.id),
            })
        except Exception as e:
            logger.error(f"Error fetching profile: {e}")
            return error_response('Failed to fetch profile', 500)

    @app.route('/api/candidate/profile', methods=['PUT'])
    @app.route('/api/worker/profile', methods=['PUT'])
    @candidate_required
    def api_update_candidate_profile():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        try:
            user = current_user
            if data.get('name'):
                user.name = data['name']
            if 'phone' in data:
                user.phone = data.get('phone') or None
            if 'bio' in data:
                user.bio = data.get('bio') or None

            if data.get('city'):
                set_user_location(user, data['city'])

            if data.get('skills'):
                replace_user_skills(user, split_skills(data['skills']), parse_int(data.get('experience')))

            db.session.commit()
            return jsonify({'success': True})
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating profile: {e}")
            return error_response('Failed to update profile', 500)

    @app.route('/api/sme/profile', methods=['GET'])
    @sme_required
    def api_sme_profile():
        location = current_user.current_location
        return jsonify({
            'name': current_user.name,
            'email': current_user.email,
            'phone': current_user.phone,
            'city': location.address if location and location.address else '',
        })

    @app.route('/api/sme/profile', methods=['PUT'])
    @sme_required
    def api_update_sme_profile():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        try:
            if data.get('name'):
                current_user.name = data['name']
            if 'phone' in data:
                current_user.phone = data.get('phone') or None
            if data.get('city'):
                set_user_location(current_user, data['city'])

            db.session.commit()
            return jsonify({'success': True})
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating profile: {e}")
            return error_response('Failed to update profile', 500)

    @app.route('/api/profile/<candidate_id>', methods=['GET'])
    def api_public_profile(candidate_id):
        """Public candidate card, addressed as wkr-<id> or <id>"""
        user_id = parse_worker_id(candidate_id)
        if not user_id:
            return error_response('Invalid candidate ID', 400)

        try:
            candidate = get_candidate(user_id)
            if not candidate:
                return error_response('Candidate not found', 404)
            return jsonify(format_candidate(candidate, include_contact=True))
        except Exception as e:
            logger.error(f"Error fetching candidate profile: {e}")
            return error_response('Failed to fetch candidate profile', 500)

    # Jobs
    @app.route('/api/jobs', methods=['GET'])
    def api_jobs():
        """Open jobs, newest first, optionally filtered by skill and company location"""
        try:
            skill = request.args.get('skill', '').strip()
            location = request.args.get('location', '').strip()

            query = Job.query.filter_by(status=JobStatus.OPEN)
            if skill:
                query = query.filter(Job.skills.any(JobSkill.skill.has(skill_name_filter(skill))))

            jobs = query.order_by(Job.created_at.desc(), Job.id.desc()).all()
            if location:
                jobs = [j for j in jobs if address_contains(j.sme.current_location, location)]

            return jsonify({'jobs': [format_job(job) for job in jobs]})
        except Exception as e:
            logger.error(f"Error fetching jobs: {e}")
            return error_response('Failed to fetch jobs', 500)

    @app.route('/api/post-job', methods=['POST'])
    @sme_required
    def api_post_job():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        title = data.get('title')
        description = data.get('description')
        if not title or not description:
            return error_response('Missing required fields: title and description', 400)

        coordinates = None
        location = data.get('location')
        if isinstance(location, dict) and location.get('lat') is not None and location.get('lng') is not None:
            try:
                coordinates = (float(location['lat']), float(location['lng']))
            except (TypeError, ValueError):
                return error_response(INVALID_BODY, 400)
            if not all(math.isfinite(c) for c in coordinates):
                return error_response(INVALID_BODY, 400)

        try:
            job = Job(
                sme_id=current_user.id,
                job_title=title,
                job_description=description,
                salary=parse_budget(data.get('budget')),
                status=JobStatus.OPEN
            )
            db.session.add(job)
            db.session.flush()

            required_skills = data.get('requiredSkills')
            if isinstance(required_skills, list):
                set_job_skills(job, split_skills(required_skills))

            if coordinates:
                set_user_location(current_user,
                                  location.get('city') or location.get('address') or '',
                                  latitude=coordinates[0],
                                  longitude=coordinates[1])

            db.session.commit()
            logger.info(f"SME {current_user.id} posted job {job.id}")

            job_data = format_job(job)
            if data.get('company'):
                job_data['company'] = data['company']
            if data.get('budget') and not job.salary:
                job_data['budget'] = str(data['budget'])

            return jsonify({
                'success': True,
                'job': job_data,
                'message': 'Job brief captured. Our network team will follow up within 24h.'
            })
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating job: {e}")
            return error_response('Failed to create job posting', 500)

    @app.route('/api/sme/jobs', methods=['GET'])
    @sme_required
    def api_sme_jobs():
        """The company's jobs with application counts"""
        try:
            jobs = Job.query.filter_by(sme_id=current_user.id)\
                .order_by(Job.created_at.desc(), Job.id.desc()).all()

            jobs_data = []
            for job in jobs:
                statuses = [a.status for a in job.applications]
                jobs_data.append({
                    'id': f"job-{job.id}",
                    'job_id': job.id,
                    'title': job.job_title or 'Untitled Job',
                    'budget': format_budget(job.salary),
                    'status': job.status.value,
                    'created_at': isoformat(job.created_at),
                    'applications_total': len(statuses),
                    'applications_pending': statuses.count(ApplicationStatus.PENDING),
                    'applications_accepted': statuses.count(ApplicationStatus.ACCEPTED),
                })

            return jsonify({'jobs': jobs_data})
        except Exception as e:
            logger.error(f"Error fetching company jobs: {e}")
            return error_response('Failed to fetch jobs', 500)

    @app.route('/api/sme/jobs/<int:job_id>', methods=['PATCH'])
    @sme_required
    def api_update_job_status(job_id):
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        status = data.get('status')
        if status not in [s.value for s in JobStatus]:
            return error_response('Invalid status. Must be OPEN or CLOSED', 400)

        try:
            job = Job.query.filter_by(id=job_id, sme_id=current_user.id).first()
            if not job:
                return error_response('Job not found', 404)

            job.status = JobStatus(status)
            db.session.commit()
            logger.info(f"SME {current_user.id} set job {job.id} to {status}")
            return jsonify({'success': True, 'job': format_job(job)})
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating job: {e}")
            return error_response('Failed to update job', 500)

    # Candidate search
    @app.route('/api/candidates', methods=['GET'])
    @app.route('/api/workers', methods=['GET'])
    def api_candidates():
        try:
            return jsonify({'results': search_candidates()})
        except Exception as e:
            logger.error(f"Error fetching candidates: {e}")
            return error_response('Failed to fetch candidates', 500)

    @app.route('/api/search', methods=['GET', 'POST'])
    def api_search():
        """Search candidates by skill, location text and optional radius around a city"""
        if request.method == 'POST':
            params = get_json_body()
            if params is None:
                return error_response(INVALID_BODY, 400)
        else:
            params = request.args

        if any(params.get(field) is not None and not isinstance(params.get(field), str)
               for field in SEARCH_TEXT_FIELDS):
            return error_response(INVALID_BODY, 400)

        try:
            results = search_candidates(
                skill=params.get('skill'),
                location=params.get('location'),
                near=params.get('near'),
                radius_km=params.get('radius_km')
            )
            return jsonify({'results': results, 'total': len(results)})
        except MarketplaceError as e:
            return error_response(e.message, e.status_code)
        except Exception as e:
            logger.error(f"Error searching candidates: {e}")
            return error_response('Failed to search workers', 500)

    # Applications
    @app.route('/api/candidate/apply', methods=['POST'])
    @app.route('/api/worker/apply', methods=['POST'])
    @candidate_required
    def api_apply():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        job_id = parse_int(data.get('job_id'))
        if not job_id:
            return error_response('Job ID is required', 400)

        try:
            application = apply_to_job(current_user, job_id, data.get('cover_letter'))
            return jsonify({
                'success': True,
                'message': 'Application submitted successfully',
                'application_id': application.id
            })
        except MarketplaceError as e:
            db.session.rollback()
            return error_response(e.message, e.status_code)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error applying for job: {e}")
            return error_response('Failed to submit application', 500)

    @app.route('/api/candidate/apply-eligibility', methods=['GET'])
    @app.route('/api/worker/apply-eligibility', methods=['GET'])
    @candidate_required
    def api_apply_eligibility():
        job_id_param = request.args.get('job_id')
        if not job_id_param:
            return error_response('Job ID is required', 400)

        job_id = parse_int(job_id_param)
        if job_id is None:
            return error_response('Invalid job ID', 400)

        try:
            return jsonify(check_apply_eligibility(current_user, job_id))
        except Exception as e:
            logger.error(f"Error checking apply eligibility: {e}")
            return error_response('Failed to check apply eligibility', 500)

    @app.route('/api/candidate/applications', methods=['GET'])
    @candidate_required
    def api_candidate_applications():
        try:
            applications = JobApplication.query.filter_by(worker_id=current_user.id)\
                .order_by(JobApplication.created_at.desc(), JobApplication.id.desc()).all()

            return jsonify({
                'applications': [{
                    'application_id': a.id,
                    'job_id': a.job_id,
                    'job_title': a.job.job_title,
                    'company_name': a.job.sme.name,
                    'status': a.status.value,
                    'cover_letter': a.cover_letter,
                    'created_at': isoformat(a.created_at),
                } for a in applications]
            })
        except Exception as e:
            logger.error(f"Error fetching applications: {e}")
            return error_response('Failed to fetch applications', 500)

    @app.route('/api/sme/applications', methods=['GET'])
    @sme_required
    def api_sme_applications():
        try:
            query = JobApplication.query.join(Job, JobApplication.job_id == Job.id)\
                .filter(Job.sme_id == current_user.id)

            job_id = parse_int(request.args.get('job_id'))
            if job_id:
                query = query.filter(Job.id == job_id)

            applications = query.order_by(JobApplication.created_at.desc(), JobApplication.id.desc()).all()

            return jsonify({
                'applications': [{
                    'application_id': a.id,
                    'job_id': a.job_id,
                    'job_title': a.job.job_title,
                    'worker_id': a.worker_id,
                    'worker_name': a.worker.name,
                    'worker_email': a.worker.email,
                    'worker_phone': a.worker.phone,
                    'status': a.status.value,
                    'cover_letter': a.cover_letter,
                    'created_at': isoformat(a.created_at),
                } for a in applications]
            })
        except Exception as e:
            logger.error(f"Error fetching applications: {e}")
            return error_response('Failed to fetch applications', 500)

    @app.route('/api/sme/applications/<int:application_id>', methods=['PATCH'])
    @sme_required
    def api_decide_application(application_id):
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        try:
            application = decide_application(current_user, application_id, data.get('status'))
            return jsonify({
                'success': True,
                'message': f"Application {application.status.value.lower()} successfully"
            })
        except MarketplaceError as e:
            db.session.rollback()
            return error_response(e.message, e.status_code)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating application: {e}")
            return error_response('Failed to update application', 500)

    # Recruitment requests
    @app.route('/api/sme/recruit', methods=['POST'])
    @sme_required
    def api_recruit():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        raw_worker_id = data.get('worker_id')
        if raw_worker_id in (None, ''):
            return error_response('Worker ID is required', 400)

        worker_id = parse_worker_id(raw_worker_id)
        if not worker_id:
            return error_response('Invalid worker ID', 400)

        try:
            recruitment, created = send_recruitment_request(current_user, worker_id)
            return jsonify({
                'success': True,
                'message': 'Recruitment request sent successfully' if created else 'Recruitment request already sent',
                'request_id': recruitment.id
            })
        except MarketplaceError as e:
            db.session.rollback()
            return error_response(e.message, e.status_code)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error sending recruitment request: {e}")
            return error_response('Failed to send recruitment request', 500)

    @app.route('/api/sme/recruitment-status', methods=['GET'])
    @app.route('/api/candidate/recruitment-status', methods=['GET'])
    @app.route('/api/worker/recruitment-status', methods=['GET'])
    @sme_required
    def api_recruitment_status():
        raw_worker_id = request.args.get('worker_id')
        if not raw_worker_id:
            return error_response('Candidate ID is required', 400)

        worker_id = parse_worker_id(raw_worker_id)
        if not worker_id:
            return error_response('Invalid candidate ID', 400)

        try:
            return jsonify(recruitment_status(current_user, worker_id))
        except Exception as e:
            logger.error(f"Error checking recruitment status: {e}")
            return error_response('Failed to check recruitment status', 500)

    @app.route('/api/sme/recruitments', methods=['GET'])
    @sme_required
    def api_sme_recruitments():
        try:
            requests_ = RecruitmentRequest.query.filter_by(sme_id=current_user.id)\
                .order_by(RecruitmentRequest.created_at.desc(), RecruitmentRequest.id.desc())\
                .limit(SME_RECRUITMENT_PAGE_SIZE).all()

            return jsonify({
                'recruitments': [{
                    'request_id': r.id,
                    'worker_id': r.worker_id,
                    'worker_name': r.worker.name,
                    'worker_email': r.worker.email,
                    'status': r.status.value,
                    'created_at': isoformat(r.created_at),
                } for r in requests_]
            })
        except Exception as e:
            logger.error(f"Error fetching SME recruitments: {e}")
            return error_response('Failed to fetch recruitments', 500)

    @app.route('/api/candidate/recruitments', methods=['GET'])
    @app.route('/api/worker/recruitments', methods=['GET'])
    @candidate_required
    def api_candidate_recruitments():
        try:
            requests_ = RecruitmentRequest.query.filter_by(worker_id=current_user.id)\
                .order_by(RecruitmentRequest.created_at.desc(), RecruitmentRequest.id.desc()).all()

            return jsonify({
                'recruitments': [{
                    'request_id': r.id,
                    'company_id': r.sme_id,
                    'company_name': r.sme.name,
                    'company_email': r.sme.email,
                    'status': r.status.value,
                    'created_at': isoformat(r.created_at),
                } for r in requests_]
            })
        except Exception as e:
            logger.error(f"Error fetching recruitments: {e}")
            return error_response('Failed to fetch recruitments', 500)

    @app.route('/api/candidate/recruitments/<int:request_id>', methods=['PATCH'])
    @app.route('/api/worker/recruitments/<int:request_id>', methods=['PATCH'])
    @candidate_required
    def api_respond_recruitment(request_id):
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        try:
            recruitment = respond_to_recruitment(current_user, request_id, data.get('status'))
            return jsonify({
                'success': True,
                'message': f"Recruitment request {recruitment.status.value.lower()} successfully"
            })
        except MarketplaceError as e:
            db.session.rollback()
            return error_response(e.message, e.status_code)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating recruitment request: {e}")
            return error_response('Failed to update recruitment request', 500)

    @app.route('/api/candidate/stats', methods=['GET'])
    @candidate_required
    def api_candidate_stats():
        try:
            applications = JobApplication.query.filter_by(worker_id=current_user.id)
            return jsonify({
                'applications': applications.count(),
                'pending': applications.filter_by(status=ApplicationStatus.PENDING).count(),
                'accepted': applications.filter_by(status=ApplicationStatus.ACCEPTED).count(),
                'recruitments': RecruitmentRequest.query.filter_by(
                    worker_id=current_user.id, status=RecruitmentStatus.PENDING).count(),
            })
        except Exception as e:
            logger.error(f"Error fetching candidate stats: {e}")
            return error_response('Failed to fetch stats', 500)

    # Notifications
    @app.route('/api/notifications', methods=['GET'])
    @login_required
    def api_notifications():
        try:
            return jsonify(list_notifications(current_user))
        except Exception as e:
            logger.error(f"Error fetching notifications: {e}")
            return error_response('Failed to fetch notifications', 500)

    @app.route('/api/notifications', methods=['PUT'])
    @login_required
    def api_update_notifications():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        notification_id = data.get('notificationId')
        read = data.get('read')

        try:
            query = Notification.query.filter_by(user_id=current_user.id)
            if notification_id:
                query.filter_by(id=notification_id).update({'read': bool(read)})
            elif isinstance(read, bool):
                query.update({'read': read})

            db.session.commit()
            return jsonify({'success': True})
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating notifications: {e}")
            return error_response('Failed to update notifications', 500)

    @app.route('/api/worker/notifications', methods=['GET'])
    @candidate_required
    def api_worker_notifications():
        try:
            return jsonify(list_notifications(current_user))
        except Exception as e:
            logger.error(f"Error fetching notifications: {e}")
            return error_response('Failed to fetch notifications', 500)

    @app.route('/api/worker/notifications', methods=['PUT'])
    @candidate_required
    def api_update_worker_notifications():
        data = get_json_body()
        if data is None:
            return error_response(INVALID_BODY, 400)

        try:
            query = Notification.query.filter_by(user_id=current_user.id)
            notification_id = data.get('notificationId')
            if notification_id:
                query.filter_by(id=notification_id).update({'read': bool(data.get('read'))})
            else:
                query.update({'read': True})

            db.session.commit()
            return jsonify({'success': True})
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating notifications: {e}")
            return error_response('Failed to update notifications', 500)

    # Matching
    @app.route('/api/recommend', methods=['GET'])
    @login_required
    def api_recommend():
        try:
            return jsonify({'recommendations': get_recommendations()})
        except Exception as e:
            logger.error(f"Error fetching recommendations: {e}")
            return error_response('Failed to fetch recommendations', 500)

    @app.route('/api/sme/matches/refresh', methods=['POST'])
    @sme_required
    def api_refresh_matches():
        try:
            count = refresh_matches()
            return jsonify({'success': True, 'matches': count})
        except Exception as e:
            logger.error(f"Error refreshing matches: {e}")
            return error_response('Failed to refresh matches', 500)

    @app.route('/api/health', methods=['GET'])
    def api_health():
        try:
            db.session.execute(text('SELECT 1'))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return jsonify({
                'status': 'error',
                'message': 'Database connection failed',
                'details': 'Please check your DATABASE_URL'
            }), 503

        return jsonify({
            'status': 'ok',
            'message': 'Database connection successful',
            'timestamp': datetime.now().isoformat()
        })
