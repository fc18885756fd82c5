"""
Integration Tests for the Authentication Flow

Register, login, token refresh, logout (revocation), password change and
student activation through the HTTP API.
"""

import pytest

from conftest import assert_success_response, assert_error_response, make_headers
from fitcoach.models import User


def login(client, email, password):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


class TestRegistration:

    def test_register_logs_in_new_owner(self, client):
        response = client.post('/api/auth/register', json={
            'full_name': 'Diego Alves',
            'email': 'Diego@Example.com',
            'password': 'SecurePass123',
            'business_name': 'Diego Personal',
        })

        data = assert_success_response(response, 201)
        assert data['access_token'] and data['refresh_token']
        assert data['user']['email'] == 'diego@example.com'
        assert data['user']['role'] == 'admin'
        assert data['tenant']['name'] == 'Diego Personal'
        assert data['tenant']['type'] == 'personal'
        assert 'password_hash' not in data['user']

    def test_register_weak_password(self, client):
        response = client.post('/api/auth/register', json={
            'full_name': 'Diego Alves', 'email': 'diego@example.com', 'password': 'short',
        })
        error = assert_error_response(response, 400, 'BAD_REQUEST')
        assert 'password' in error['details']

    def test_register_duplicate_email(self, client, admin):
        response = client.post('/api/auth/register', json={
            'full_name': 'Ana Souza', 'email': 'ana@irongym.com', 'password': 'SecurePass123',
        })
        assert_error_response(response, 409, 'CONFLICT')

    def test_register_disabled(self, app, client):
        app.config['ENABLE_REGISTRATION'] = False
        response = client.post('/api/auth/register', json={
            'full_name': 'Diego Alves', 'email': 'diego@example.com', 'password': 'SecurePass123',
        })
        assert_error_response(response, 403, 'FORBIDDEN')

    def test_register_requires_json(self, client):
        response = client.post('/api/auth/register', data='x', content_type='text/plain')
        assert_error_response(response, 400, 'BAD_REQUEST')


class TestLogin:

    def test_login_success(self, client, admin):
        data = assert_success_response(login(client, 'ANA@irongym.com', 'AdminPass123'))

        assert data['user']['id'] == str(admin.id)
        assert data['tenant']['slug'] == 'iron-gym'

    def test_login_wrong_password(self, client, admin):
        assert_error_response(login(client, 'ana@irongym.com', 'WrongPass123'), 401, 'UNAUTHORIZED')

    def test_login_unknown_email(self, client):
        assert_error_response(login(client, 'nobody@example.com', 'WrongPass123'), 401, 'UNAUTHORIZED')

    def test_login_suspended_tenant(self, client, session, tenant, admin):
        tenant.status = 'suspended'
        session.commit()

        error = assert_error_response(login(client, 'ana@irongym.com', 'AdminPass123'), 403, 'FORBIDDEN')
        assert error['message'] == 'Organization is suspended'

    def test_super_admin_has_no_tenant(self, client, super_admin):
        data = assert_success_response(login(client, 'root@fitcoach.app', 'RootPass123'))
        assert data['tenant'] is None


class TestTokens:

    def test_me(self, client, admin_headers):
        data = assert_success_response(client.get('/api/auth/me', headers=admin_headers))
        assert data['user']['email'] == 'ana@irongym.com'
        assert data['tenant']['name'] == 'Iron Gym'

    def test_me_without_token(self, client):
        assert_error_response(client.get('/api/auth/me'), 401, 'UNAUTHORIZED')

    def test_me_with_garbage_token(self, client):
        response = client.get('/api/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
        assert_error_response(response, 401, 'UNAUTHORIZED')

    def test_refresh(self, client, admin):
        tokens = assert_success_response(login(client, 'ana@irongym.com', 'AdminPass123'))

        response = client.post('/api/auth/refresh', headers={
            'Authorization': f"Bearer {tokens['refresh_token']}"
        })

        data = assert_success_response(response)
        me = client.get('/api/auth/me', headers={'Authorization': f"Bearer {data['access_token']}"})
        assert_success_response(me)

    def test_refresh_rejects_access_token(self, client, admin_headers):
        response = client.post('/api/auth/refresh', headers=admin_headers)
        assert response.status_code == 401

    def test_refresh_inactive_user(self, client, session, admin):
        tokens = assert_success_response(login(client, 'ana@irongym.com', 'AdminPass123'))
        admin.is_active = False
        session.commit()

        response = client.post('/api/auth/refresh', headers={
            'Authorization': f"Bearer {tokens['refresh_token']}"
        })
        assert_error_response(response, 401, 'UNAUTHORIZED')

    def test_logout_revokes_token(self, client, admin_headers):
        assert_success_response(client.post('/api/auth/logout', headers=admin_headers))

        response = client.get('/api/auth/me', headers=admin_headers)
        assert_error_response(response, 401, 'UNAUTHORIZED')


class TestChangePassword:

    def test_change_password(self, client, trainer, trainer_headers):
        response = client.post('/api/auth/change-password', headers=trainer_headers, json={
            'current_password': 'TrainerPass123', 'new_password': 'BrandNew456',
        })

        assert_success_response(response)
        assert_success_response(login(client, 'bruno@irongym.com', 'BrandNew456'))

    def test_wrong_current_password(self, client, trainer_headers):
        response = client.post('/api/auth/change-password', headers=trainer_headers, json={
            'current_password': 'Nope12345', 'new_password': 'BrandNew456',
        })
        error = assert_error_response(response, 400, 'BAD_REQUEST')
        assert error['message'] == 'Current password is incorrect'


class TestActivation:

    def test_invite_then_activate(self, client, admin_headers):
        invite = assert_success_response(client.post('/api/students', headers=admin_headers, json={
            'full_name': 'Eva Rocha', 'email': 'eva@example.com',
        }), 201)
        token = invite['activation_link'].split('token=')[1]

        data = assert_success_response(client.post('/api/auth/activate', json={
            'token': token, 'password': 'EvaPass123',
        }))

        assert data['user']['role'] == 'student'
        student_headers = make_headers(User.find_by_email('eva@example.com'))
        profile = assert_success_response(client.get('/api/me/profile', headers=student_headers))
        assert profile['enrollment_status'] == 'active'

        reused = client.post('/api/auth/activate', json={'token': token, 'password': 'EvaPass123'})
        assert_error_response(reused, 400, 'BAD_REQUEST')

    def test_activate_missing_fields(self, client):
        response = client.post('/api/auth/activate', json={'token': 'x' * 20})
        assert_error_response(response, 400, 'BAD_REQUEST')

    def test_activate_unknown_token(self, client):
        response = client.post('/api/auth/activate', json={'token': 'x' * 20, 'password': 'EvaPass123'})
        error = assert_error_response(response, 400, 'BAD_REQUEST')
        assert error['message'] == 'Invalid or used activation token'
