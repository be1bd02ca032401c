"""
Tests for candidate listing and search.
"""

import pytest


@pytest.fixture
def candidates(register_candidate):
    """Three candidates in Pune, Mumbai and Bengaluru."""
    _, amina = register_candidate()
    _, kwame = register_candidate(email='kwame@example.com', name='Kwame Boateng', city='Mumbai',
                                  skills='Construction, Logistics')
    _, lindiwe = register_candidate(email='lindiwe@example.com', name='Lindiwe Ndlovu',
                                    city='Bengaluru', skills='Hospitality, Catering')
    return amina, kwame, lindiwe


class TestCandidateListing:

    def test_lists_all_candidates(self, candidates, sme, client):
        results = client.get('/api/candidates').get_json()['results']

        assert [r['id'] for r in results] == [f"wkr-{c['id']}" for c in candidates]
        assert 'email' not in results[0]

    def test_workers_alias(self, candidates, client):
        assert len(client.get('/api/workers').get_json()['results']) == 3


class TestSearch:

    def test_skill_filter(self, candidates, client):
        data = client.get('/api/search?skill=construction').get_json()

        assert data['total'] == 2
        assert {r['name'] for r in data['results']} == {'Amina Yusuf', 'Kwame Boateng'}

    def test_location_filter(self, candidates, client):
        data = client.get('/api/search?location=benga').get_json()

        assert [r['name'] for r in data['results']] == ['Lindiwe Ndlovu']

    def test_near_filter_sorts_by_distance(self, candidates, client):
        data = client.get('/api/search?near=Mumbai&radius_km=200').get_json()

        names = [r['name'] for r in data['results']]
        assert names == ['Kwame Boateng', 'Amina Yusuf']
        assert data['results'][0]['distance_km'] == 0
        assert 100 < data['results'][1]['distance_km'] < 200

    def test_near_default_radius(self, candidates, client):
        data = client.get('/api/search?near=pune').get_json()

        assert [r['name'] for r in data['results']] == ['Amina Yusuf']

    def test_unknown_city(self, candidates, client):
        response = client.get('/api/search?near=Atlantis')

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_invalid_radius(self, candidates, client):
        response = client.get('/api/search?near=Mumbai&radius_km=far')

        assert response.status_code == 400

    @pytest.mark.parametrize('radius', ['nan', 'inf', '-inf'])
    def test_non_finite_radius(self, candidates, client, radius):
        response = client.get(f"/api/search?near=Pune&radius_km={radius}")

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid radius'

    def test_default_radius_from_config(self, app, candidates, client):
        """Test that the radius used without radius_km comes from configuration."""
        app.config['SEARCH_RADIUS_KM'] = 200

        data = client.get('/api/search?near=Mumbai').get_json()

        assert [r['name'] for r in data['results']] == ['Kwame Boateng', 'Amina Yusuf']

    def test_post_search(self, candidates, client):
        response = client.post('/api/search', json={'skill': 'catering', 'near': 'Mysuru',
                                                     'radius_km': 300})

        data = response.get_json()
        assert data['total'] == 1
        assert data['results'][0]['name'] == 'Lindiwe Ndlovu'

    def test_post_search_malformed(self, client):
        response = client.post('/api/search', data='nope', content_type='application/json')

        assert response.status_code == 400

    @pytest.mark.parametrize('body', [{'skill': 5}, {'near': ['Pune']}, {'location': {'city': 'Pune'}}])
    def test_post_search_non_text_fields(self, candidates, client, body):
        response = client.post('/api/search', json=body)

        assert response.status_code == 400
        assert response.get_json() == {
            'success': False,
            'error': 'Invalid request format. Please check your input.',
        }
