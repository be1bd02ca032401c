import re
import math
import logging
from typing import List, Optional, Union
from flask import current_app

logger = logging.getLogger(__name__)

WORKER_ID_PREFIX = 'wkr-'
JOB_ID_PREFIX = 'job-'

def validate_email(email: str) -> bool:
    """Validate email address format"""
    if not email or not isinstance(email, str):
        return False

    pattern = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'
    return bool(re.match(pattern, email))

def validate_password(password: str) -> bool:
    """Passwords need at least 8 characters"""
    return bool(password) and len(password) >= 8

def parse_worker_id(value: Union[str, int, None]) -> Optional[int]:
    """Parse a public candidate id ("wkr-12" or "12") into a user id.

    Returns None when the value is missing, non-numeric or not positive.
    """
    if value is None:
        return None

    text = str(value).strip()
    if text.startswith(WORKER_ID_PREFIX):
        text = text[len(WORKER_ID_PREFIX):]

    # Leading digits only, the way the web client's parseInt reads ids
    match = re.match(r'^\d+', text)
    if not match:
        return None

    user_id = int(match.group(0))
    return user_id if user_id > 0 else None

def parse_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = re.match(r'^\s*-?\d+', str(value))
    return int(match.group(0)) if match else None

def parse_budget(budget) -> Optional[float]:
    """Turn a free-text budget ("₹12,000 / month") into a number"""
    if budget is None or budget == '':
        return None

    digits = re.sub(r'[^0-9.]', '', str(budget))
    try:
        return float(digits)
    except ValueError:
        logger.debug(f"Could not parse budget {budget!r}")
        return None

def format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)

def format_budget(salary: Optional[float]) -> str:
    if not salary:
        return 'Not specified'
    symbol = current_app.config.get('CURRENCY_SYMBOL', '₹')
    return f"{symbol}{format_amount(salary)}"

def split_skills(skills: Union[str, List[str], None]) -> List[str]:
    """Normalise a comma separated string or a list into unique skill names"""
    if not skills:
        return []

    if isinstance(skills, str):
        skills = skills.split(',')

    result = []
    seen = set()
    for name in skills:
        name = str(name).strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            result.append(name)
    return result

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def average_experience(user_skills) -> int:
    """Mean experience across a user's skills; missing values count as zero"""
    if not user_skills:
        return 0
    total = sum(us.experience_years or 0 for us in user_skills)
    return round_half_up(total / len(user_skills))

def hourly_rate_for(user_id: int) -> int:
    """Stable display rate in the 30-59 range"""
    return 30 + (user_id * 7) % 30

def rating_for(user_id: int) -> float:
    """Stable display rating between 4.5 and 5.0"""
    return round(4.5 + ((user_id * 37) % 51) / 100, 2)

def default_bio(skill_names: List[str]) -> str:
    if skill_names:
        return f"Experienced {', '.join(skill_names)} professional."
    return "Available worker ready for opportunities."

def location_payload(location) -> dict:
    country = current_app.config.get('DEFAULT_COUNTRY', 'India')
    if location is None:
        return {'city': 'Unknown', 'country': country, 'lat': 0, 'lng': 0}
    return {
        'city': location.address or 'Unknown',
        'country': country,
        'lat': location.latitude or 0,
        'lng': location.longitude or 0,
    }

def format_candidate(user, include_contact: bool = False) -> dict:
    """Candidate card shared by search, listing, profile and recommendations"""
    skill_names = user.skill_names
    card = {
        'id': f"{WORKER_ID_PREFIX}{user.id}",
        'name': user.name,
        'headline': f"{skill_names[0]} specialist" if skill_names else 'Available worker',
        'experience': average_experience(user.skills),
        'availability': 'Immediate',
        'hourlyRate': hourly_rate_for(user.id),
        'location': location_payload(user.current_location),
        'rating': rating_for(user.id),
        'skills': skill_names,
        'bio': user.bio or default_bio(skill_names),
    }
    if include_contact:
        card['email'] = user.email
        card['phone'] = user.phone
    return card

def format_job(job) -> dict:
    location = job.sme.current_location if job.sme else None
    return {
        'id': f"{JOB_ID_PREFIX}{job.id}",
        'job_id': job.id,
        'title': job.job_title or 'Untitled Job',
        'company': job.sme.name if job.sme else None,
        'budget': format_budget(job.salary),
        'location': location_payload(location),
        'requiredSkills': job.skill_names,
        'description': job.job_description or '',
        'status': job.status.value,
    }

def isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None
