"""
Pytest configuration and shared fixtures.
"""

import pytest

from app import create_app
from config import TestingConfig
from database import db


@pytest.fixture
def app(tmp_path):
    """Application bound to a throwaway SQLite file."""
    app = create_app(
        {'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}"},
        config_class=TestingConfig,
    )
    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_candidate(app):
    """Register a candidate on a fresh client; returns (client, user)."""
    def _register(email='amina@example.com', name='Amina Yusuf', city='Pune',
                  skills='Electrical, Construction', password='password123', **extra):
        client = app.test_client()
        payload = {
            'name': name,
            'email': email,
            'password': password,
            'city': city,
            'skillFocus': skills,
        }
        payload.update(extra)
        response = client.post('/api/auth/register-candidate', json=payload)
        assert response.status_code == 200, response.get_json()
        return client, response.get_json()['user']
    return _register


@pytest.fixture
def register_sme(app):
    """Register a company on a fresh client; returns (client, user)."""
    def _register(email='ops@sunpulse.example', company='SunPulse Energy', city='Pune',
                  password='password123', **extra):
        client = app.test_client()
        payload = {
            'companyName': company,
            'email': email,
            'password': password,
            'hqCity': city,
        }
        payload.update(extra)
        response = client.post('/api/auth/register-sme', json=payload)
        assert response.status_code == 200, response.get_json()
        return client, response.get_json()['user']
    return _register


@pytest.fixture
def candidate(register_candidate):
    return register_candidate()


@pytest.fixture
def sme(register_sme):
    return register_sme()


@pytest.fixture
def post_job():
    """Post a job as the given SME client; returns the numeric job id."""
    def _post(client, title='Mini-grid rollout technician', skills=None, budget='12000', **extra):
        payload = {
            'title': title,
            'description': 'Deploy modular solar kits with rapid QA cycles.',
            'budget': budget,
            'requiredSkills': skills if skills is not None else ['Electrical', 'Construction'],
        }
        payload.update(extra)
        response = client.post('/api/post-job', json=payload)
        assert response.status_code == 200, response.get_json()
        return response.get_json()['job']['job_id']
    return _post
