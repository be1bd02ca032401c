"""
Tests for job applications and the decisions companies make on them.
"""

import pytest


@pytest.fixture
def job_id(sme, post_job):
    client, _ = sme
    return post_job(client)


class TestApply:
    """Test POST /api/candidate/apply."""

    def test_apply_notifies_company(self, sme, candidate, job_id):
        sme_client, _ = sme
        candidate_client, _ = candidate

        response = candidate_client.post('/api/candidate/apply', json={
            'job_id': job_id, 'cover_letter': 'I have wired 40 mini-grids.',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['application_id']

        notifications = sme_client.get('/api/notifications').get_json()
        assert notifications['unreadCount'] == 1
        assert notifications['notifications'][0]['title'] == 'New Job Application'
        assert notifications['notifications'][0]['type'] == 'APPLICATION_UPDATE'
        assert notifications['notifications'][0]['link'] == f"/sme/applications?job_id={job_id}"

    def test_worker_alias(self, candidate, job_id):
        client, _ = candidate

        assert client.post('/api/worker/apply', json={'job_id': job_id}).status_code == 200

    def test_duplicate_application(self, candidate, job_id):
        client, _ = candidate
        client.post('/api/candidate/apply', json={'job_id': job_id})

        response = client.post('/api/candidate/apply', json={'job_id': job_id})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'You have already applied for this job'

    def test_missing_job_id(self, candidate):
        client, _ = candidate

        response = client.post('/api/candidate/apply', json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Job ID is required'

    def test_unknown_job(self, candidate):
        client, _ = candidate

        response = client.post('/api/candidate/apply', json={'job_id': 9999})

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Job not found or not available'

    def test_closed_job(self, sme, candidate, job_id):
        sme_client, _ = sme
        candidate_client, _ = candidate
        sme_client.patch(f"/api/sme/jobs/{job_id}", json={'status': 'CLOSED'})

        response = candidate_client.post('/api/candidate/apply', json={'job_id': job_id})

        assert response.status_code == 404

    def test_company_cannot_apply(self, sme, job_id):
        client, _ = sme

        assert client.post('/api/candidate/apply', json={'job_id': job_id}).status_code == 403

    def test_blocked_by_recruitment_request(self, sme, candidate, job_id):
        """Test that an open recruitment offer from the company blocks applying."""
        sme_client, _ = sme
        candidate_client, user = candidate
        sme_client.post('/api/sme/recruit', json={'worker_id': f"wkr-{user['id']}"})

        response = candidate_client.post('/api/candidate/apply', json={'job_id': job_id})

        assert response.status_code == 400
        assert 'recruitment offer' in response.get_json()['error']

    def test_blocked_by_accepted_recruitment(self, sme, candidate, job_id):
        """Test that an accepted recruitment offer still blocks applying."""
        sme_client, _ = sme
        candidate_client, user = candidate
        request_id = sme_client.post('/api/sme/recruit', json={'worker_id': user['id']}).get_json()['request_id']
        candidate_client.patch(f"/api/candidate/recruitments/{request_id}", json={'status': 'ACCEPTED'})

        response = candidate_client.post('/api/candidate/apply', json={'job_id': job_id})

        assert response.status_code == 400
        assert 'recruitment offer' in response.get_json()['error']

    def test_rejected_recruitment_does_not_block(self, sme, candidate, job_id):
        sme_client, _ = sme
        candidate_client, user = candidate
        request_id = sme_client.post('/api/sme/recruit', json={'worker_id': user['id']}).get_json()['request_id']
        candidate_client.patch(f"/api/candidate/recruitments/{request_id}", json={'status': 'REJECTED'})

        response = candidate_client.post('/api/candidate/apply', json={'job_id': job_id})

        assert response.status_code == 200


class TestEligibility:
    """Test GET /api/candidate/apply-eligibility."""

    def test_eligible(self, candidate, job_id):
        client, _ = candidate

        data = client.get(f"/api/candidate/apply-eligibility?job_id={job_id}").get_json()

        assert data == {
            'canApply': True,
            'reason': None,
            'hasActiveRecruitment': False,
            'hasApplicationForJob': False,
        }

    def test_already_applied(self, candidate, job_id):
        client, _ = candidate
        client.post('/api/candidate/apply', json={'job_id': job_id})

        data = client.get(f"/api/worker/apply-eligibility?job_id={job_id}").get_json()

        assert data['canApply'] is False
        assert data['hasApplicationForJob'] is True

    def test_active_recruitment(self, sme, candidate, job_id):
        sme_client, _ = sme
        candidate_client, user = candidate
        sme_client.post('/api/sme/recruit', json={'worker_id': user['id']})

        data = candidate_client.get(f"/api/candidate/apply-eligibility?job_id={job_id}").get_json()

        assert data['canApply'] is False
        assert data['hasActiveRecruitment'] is True

    def test_accepted_recruitment(self, sme, candidate, job_id):
        sme_client, _ = sme
        candidate_client, user = candidate
        request_id = sme_client.post('/api/sme/recruit', json={'worker_id': user['id']}).get_json()['request_id']
        candidate_client.patch(f"/api/candidate/recruitments/{request_id}", json={'status': 'ACCEPTED'})

        data = candidate_client.get(f"/api/candidate/apply-eligibility?job_id={job_id}").get_json()

        assert data['canApply'] is False
        assert data['hasActiveRecruitment'] is True
        assert data['reason'] == 'You already have a recruitment offer from this company.'

    def test_unavailable_job(self, candidate):
        client, _ = candidate

        data = client.get('/api/candidate/apply-eligibility?job_id=9999').get_json()

        assert data['canApply'] is False
        assert data['reason'] == 'Job is not available'

    def test_missing_and_invalid_job_id(self, candidate):
        client, _ = candidate

        assert client.get('/api/candidate/apply-eligibility').status_code == 400
        assert client.get('/api/candidate/apply-eligibility?job_id=abc').status_code == 400


class TestApplicationLists:

    def test_candidate_applications(self, sme, candidate, job_id):
        client, _ = candidate
        client.post('/api/candidate/apply', json={'job_id': job_id, 'cover_letter': 'Hello'})

        applications = client.get('/api/candidate/applications').get_json()['applications']

        assert len(applications) == 1
        assert applications[0]['job_title'] == 'Mini-grid rollout technician'
        assert applications[0]['company_name'] == 'SunPulse Energy'
        assert applications[0]['status'] == 'PENDING'
        assert applications[0]['cover_letter'] == 'Hello'

    def test_sme_applications_filtered_by_job(self, sme, register_candidate, post_job, job_id):
        sme_client, _ = sme
        other_job = post_job(sme_client, title='Second job')
        amina_client, _ = register_candidate()
        kwame_client, kwame = register_candidate(email='kwame@example.com', name='Kwame Boateng')
        amina_client.post('/api/candidate/apply', json={'job_id': job_id})
        kwame_client.post('/api/candidate/apply', json={'job_id': other_job})

        everything = sme_client.get('/api/sme/applications').get_json()['applications']
        filtered = sme_client.get(f"/api/sme/applications?job_id={other_job}").get_json()['applications']

        assert len(everything) == 2
        assert len(filtered) == 1
        assert filtered[0]['worker_id'] == kwame['id']
        assert filtered[0]['worker_email'] == 'kwame@example.com'

    def test_sme_only_sees_own_applications(self, sme, register_sme, candidate, job_id):
        candidate_client, _ = candidate
        candidate_client.post('/api/candidate/apply', json={'job_id': job_id})
        other_client, _ = register_sme(email='talent@origin.example', company='Origin Retreats')

        assert other_client.get('/api/sme/applications').get_json()['applications'] == []


class TestDecisions:
    """Test PATCH /api/sme/applications/<id>."""

    @pytest.fixture
    def application_id(self, candidate, job_id):
        client, _ = candidate
        return client.post('/api/candidate/apply', json={'job_id': job_id}).get_json()['application_id']

    def test_accept_notifies_candidate(self, sme, candidate, application_id):
        sme_client, _ = sme
        candidate_client, _ = candidate

        response = sme_client.patch(f"/api/sme/applications/{application_id}", json={'status': 'ACCEPTED'})

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Application accepted successfully'

        notification = candidate_client.get('/api/notifications').get_json()['notifications'][0]
        assert notification['title'] == 'Application ACCEPTED'
        assert 'has been accepted' in notification['message']

        applications = candidate_client.get('/api/candidate/applications').get_json()['applications']
        assert applications[0]['status'] == 'ACCEPTED'

    def test_decision_is_final(self, sme, application_id):
        client, _ = sme
        client.patch(f"/api/sme/applications/{application_id}", json={'status': 'REJECTED'})

        response = client.patch(f"/api/sme/applications/{application_id}", json={'status': 'ACCEPTED'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Application has already been rejected'

    def test_invalid_status(self, sme, application_id):
        client, _ = sme

        response = client.patch(f"/api/sme/applications/{application_id}", json={'status': 'PENDING'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid status. Must be ACCEPTED or REJECTED'

    def test_other_company_forbidden(self, register_sme, application_id):
        other_client, _ = register_sme(email='talent@origin.example', company='Origin Retreats')

        response = other_client.patch(f"/api/sme/applications/{application_id}", json={'status': 'ACCEPTED'})

        assert response.status_code == 403

    def test_unknown_application(self, sme):
        client, _ = sme

        response = client.patch('/api/sme/applications/9999', json={'status': 'ACCEPTED'})

        assert response.status_code == 404


class TestCandidateStats:

    def test_counts(self, sme, candidate, post_job, job_id):
        sme_client, _ = sme
        candidate_client, user = candidate
        second = post_job(sme_client, title='Second job')
        first_app = candidate_client.post('/api/candidate/apply', json={'job_id': job_id}).get_json()['application_id']
        candidate_client.post('/api/candidate/apply', json={'job_id': second})
        sme_client.patch(f"/api/sme/applications/{first_app}", json={'status': 'ACCEPTED'})

        stats = candidate_client.get('/api/candidate/stats').get_json()

        assert stats == {'applications': 2, 'pending': 1, 'accepted': 1, 'recruitments': 0}
