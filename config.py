import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default='false'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///geomatchx.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 300,
        'pool_pre_ping': True,
    }

    ALLOWED_ORIGINS = os.environ.get('ALLOWED_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')

    # Session cookie lasts a week
    PRODUCTION = _env_bool('PRODUCTION')
    REMEMBER_COOKIE_DURATION = timedelta(days=7)
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SAMESITE = 'Lax'
    REMEMBER_COOKIE_SECURE = PRODUCTION
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = PRODUCTION

    # Matching
    MATCH_MIN_SCORE = float(os.environ.get('MATCH_MIN_SCORE', '40'))
    MATCH_DISTANCE_SIGMA_KM = float(os.environ.get('MATCH_DISTANCE_SIGMA_KM', '50'))
    MATCH_REFRESH_MINUTES = int(os.environ.get('MATCH_REFRESH_MINUTES', '60'))

    # Candidate search around a city when no radius is given
    SEARCH_RADIUS_KM = float(os.environ.get('SEARCH_RADIUS_KM', '50'))

    NOTIFICATION_RETENTION_DAYS = int(os.environ.get('NOTIFICATION_RETENTION_DAYS', '90'))

    DEFAULT_COUNTRY = os.environ.get('DEFAULT_COUNTRY', 'India')
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', '₹')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    LOG_LEVEL = 'WARNING'
