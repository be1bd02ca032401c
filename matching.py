"""
Candidate-to-job matching.

Matches are precomputed into the ``matches`` table by ``refresh_matches``
(run by the scheduler, the CLI or an SME on demand) and read back by the
recommendation endpoint. A score combines skill coverage with proximity:

    score = 100 * (0.7 * skill_score + 0.3 * distance_score)

where skill_score is the share of the job's required skills the candidate
holds and distance_score decays exponentially with the haversine distance
between the candidate and the hiring company.
"""

import math
import logging
from typing import Dict, List, Optional, Tuple

from flask import current_app

from database import db
from marketplace import notify
from models import Job, JobStatus, Match, User, UserType, NotificationType
from utils import format_candidate

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
SKILL_WEIGHT = 0.7
DISTANCE_WEIGHT = 0.3
RECOMMENDATION_POOL = 10
RECOMMENDATION_COUNT = 3


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres"""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def location_distance_km(loc1, loc2) -> Optional[float]:
    """Distance between two UserLocation rows, None when either lacks coordinates"""
    if loc1 is None or loc2 is None or not loc1.has_coordinates or not loc2.has_coordinates:
        return None
    return haversine_km(loc1.latitude, loc1.longitude, loc2.latitude, loc2.longitude)


def skill_score(candidate_skill_ids, job_skill_ids) -> float:
    job_skill_ids = set(job_skill_ids)
    if not job_skill_ids:
        return 1.0  # No requirements
    return len(job_skill_ids & set(candidate_skill_ids)) / len(job_skill_ids)


def distance_score(distance_km: Optional[float], sigma: float = 50.0) -> float:
    if distance_km is None or distance_km < 0:
        return 0.0
    return max(0.0, min(1.0, math.exp(-distance_km / sigma)))


def match_score(skills: float, distance_km: Optional[float], sigma: float = 50.0) -> float:
    score = 100 * (SKILL_WEIGHT * skills + DISTANCE_WEIGHT * distance_score(distance_km, sigma))
    return round(score, 1)


def compute_matches(jobs: List[Job], candidates: List[User], min_score: float,
                    sigma: float) -> List[Tuple[int, int, Optional[float], float]]:
    """Score every job/candidate pair; returns (job_id, worker_id, distance_km, score) tuples"""
    results = []
    for job in jobs:
        job_skill_ids = {js.skill_id for js in job.skills}
        company_location = job.sme.current_location if job.sme else None

        for candidate in candidates:
            candidate_skill_ids = {us.skill_id for us in candidate.skills}
            if job_skill_ids and not (job_skill_ids & candidate_skill_ids):
                continue

            distance = location_distance_km(candidate.current_location, company_location)
            score = match_score(skill_score(candidate_skill_ids, job_skill_ids), distance, sigma)
            if score < min_score:
                continue

            results.append((job.id, candidate.id,
                            round(distance, 2) if distance is not None else None, score))
    return results


def refresh_matches(notify_new: bool = True) -> int:
    """Rebuild the matches table for all open jobs and candidates.

    Candidates are notified about pairs that did not exist before this run.
    Returns the number of stored matches.
    """
    config = current_app.config
    min_score = config.get('MATCH_MIN_SCORE', 40)
    sigma = config.get('MATCH_DISTANCE_SIGMA_KM', 50.0)

    jobs = Job.query.filter_by(status=JobStatus.OPEN).all()
    candidates = User.query.filter_by(user_type=UserType.CANDIDATE).all()

    previous = {(m.job_id, m.worker_id) for m in Match.query.all()}
    computed = compute_matches(jobs, candidates, min_score, sigma)
    jobs_by_id = {job.id: job for job in jobs}

    try:
        Match.query.delete()
        for job_id, worker_id, distance, score in computed:
            db.session.add(Match(job_id=job_id, worker_id=worker_id, distance_km=distance, score=score))

            if notify_new and (job_id, worker_id) not in previous:
                job = jobs_by_id[job_id]
                notify(
                    worker_id,
                    NotificationType.MATCH,
                    'New Job Match',
                    f"\"{job.job_title or 'Untitled Job'}\" at {job.sme.name} matches your profile",
                    '/jobs'
                )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Refreshed matches: {len(computed)} pairs across {len(jobs)} open jobs "
                f"and {len(candidates)} candidates")
    return len(computed)


def match_driver(distance_km: Optional[float], score: Optional[float]) -> str:
    if distance_km is not None and distance_km < 5:
        return 'Within 5km radius & high reliability score'
    if score is not None and score > 90:
        return 'Top percentile service reviews'
    return 'Skill proximity + verified completion rate'


def get_recommendations(limit: int = RECOMMENDATION_COUNT) -> List[Dict]:
    """Top matches by score, formatted as recommendation cards"""
    matches = Match.query.order_by(Match.score.desc().nullslast(), Match.id.asc()).limit(RECOMMENDATION_POOL).all()

    recommendations = []
    for index, match in enumerate(matches):
        if not match.worker_id:
            continue

        worker = User.query.filter_by(id=match.worker_id, user_type=UserType.CANDIDATE).first()
        if not worker:
            continue

        recommendations.append({
            'id': f"rec-{match.id}",
            'worker': format_candidate(worker),
            'matchScore': match.score if match.score is not None else 85 - index * 5,
            'driver': match_driver(match.distance_km, match.score),
            'job_id': match.job_id,
            'distance_km': match.distance_km,
        })

    return recommendations[:limit]
