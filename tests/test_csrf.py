"""
Tests for CSRF protection.

Uses CSRFTestConfig which enables flask-wtf CSRFProtect.
"""

import re

from conftest import PASSWORD, USERNAME


def _csrf_token(client, path='/login'):
    html = client.get(path).data.decode()
    match = re.search(r'name="csrf_token"[^>]*value="([^"]+)"', html)
    assert match, 'CSRF token not found in form'
    return match.group(1)


class TestCSRFProtection:
    """Tests for CSRF token validation."""

    def test_post_without_csrf_token_fails(self, csrf_client):
        """POST without a CSRF token is rejected with a flash, not a login."""
        response = csrf_client.post('/login', data={
            'username': USERNAME,
            'password': PASSWORD,
        }, follow_redirects=True)

        assert response.status_code == 200
        assert b'form session has expired' in response.data
        assert b'Signed in as' not in response.data

    def test_rejection_redirects_to_same_host_referrer(self, csrf_client):
        response = csrf_client.post(
            '/login',
            data={'username': USERNAME, 'password': PASSWORD},
            headers={'Referer': 'http://localhost/login'},
        )
        assert response.status_code == 302
        assert response.headers['Location'] == 'http://localhost/login'

    def test_rejection_ignores_foreign_referrer(self, csrf_client):
        response = csrf_client.post(
            '/login',
            data={'username': USERNAME, 'password': PASSWORD},
            headers={'Referer': 'https://evil.example/phish'},
        )
        assert response.status_code == 302
        assert 'evil.example' not in response.headers['Location']

    def test_post_with_valid_csrf_token_succeeds(self, csrf_client):
        response = csrf_client.post('/login', data={
            'username': USERNAME,
            'password': PASSWORD,
            'csrf_token': _csrf_token(csrf_client),
        }, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/campgrounds')

    def test_csrf_token_in_logout_form(self, csrf_client):
        csrf_client.post('/login', data={
            'username': USERNAME,
            'password': PASSWORD,
            'csrf_token': _csrf_token(csrf_client),
        })

        response = csrf_client.get('/campgrounds')
        assert b'action="/logout"' in response.data
        assert b'name="csrf_token"' in response.data
