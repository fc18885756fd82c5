"""
Unit Tests for Utility Functions

Tests for utility modules including:
- responses.py: JSON response envelope and service error mapping
- decorators.py: Role, tenant and JSON body guards
- helpers.py: Request parsing helpers
"""

import uuid
from datetime import date

from flask import g

from fitcoach.utils.decorators import role_required, tenant_required, staff_required, validate_json
from fitcoach.utils.helpers import parse_uuid, parse_date, get_pagination
from fitcoach.utils.responses import (
    success_response,
    error_response,
    ok,
    created,
    not_found,
    service_error,
)


class TestResponseHelpers:

    def test_success_response_basic(self, app):
        response, status_code = success_response()

        assert status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['message'] == 'Success'
        assert 'data' not in data

    def test_ok_and_created(self, app):
        response, status_code = ok({'id': 1}, 'Fetched')
        assert status_code == 200
        assert response.get_json()['data'] == {'id': 1}

        _, status_code = created({'id': 1})
        assert status_code == 201

    def test_error_response_envelope(self, app):
        response, status_code = error_response('CUSTOM', 'Something broke', {'field': ['bad']}, 422)

        assert status_code == 422
        body = response.get_json()
        assert body['success'] is False
        assert body['error'] == {'code': 'CUSTOM', 'message': 'Something broke', 'details': {'field': ['bad']}}

    def test_not_found_message(self, app):
        response, status_code = not_found('Student')
        assert status_code == 404
        assert response.get_json()['error']['message'] == 'Student not found'


class TestServiceError:

    def test_not_found(self, app):
        response, status_code = service_error('Workout not found')
        assert status_code == 404
        assert response.get_json()['error']['code'] == 'NOT_FOUND'

    def test_conflict(self, app):
        _, status_code = service_error('Slot is already booked or unavailable')
        assert status_code == 409

    def test_failure_is_internal(self, app):
        _, status_code = service_error('Failed to create student: boom')
        assert status_code == 500

    def test_other_errors_are_bad_requests(self, app):
        response, status_code = service_error('Current password is incorrect')
        assert status_code == 400
        assert response.get_json()['error']['message'] == 'Current password is incorrect'


class TestHelpers:

    def test_parse_uuid(self):
        value = uuid.uuid4()
        assert parse_uuid(str(value)) == value
        assert parse_uuid(value) is value
        assert parse_uuid('not-a-uuid') is None
        assert parse_uuid('') is None

    def test_parse_date(self):
        assert parse_date('2024-05-06') == date(2024, 5, 6)
        assert parse_date('06/05/2024') is None
        assert parse_date(None) is None

    def test_pagination_bounds(self, app):
        with app.test_request_context('/?page=0&per_page=1000'):
            page, per_page = get_pagination()
        assert page == 1
        assert per_page == app.config['MAX_PAGE_SIZE']

    def test_pagination_defaults(self, app):
        with app.test_request_context('/'):
            assert get_pagination() == (1, app.config['DEFAULT_PAGE_SIZE'])


class TestDecorators:

    @staticmethod
    def _view():
        return 'ok'

    def test_role_required_allows_listed_role(self, app):
        view = role_required(['admin'])(self._view)
        with app.test_request_context('/'):
            g.user_role = 'admin'
            assert view() == 'ok'

    def test_role_required_rejects_other_roles(self, app):
        view = role_required(['admin'])(self._view)
        with app.test_request_context('/'):
            g.user_role = 'student'
            response, status_code = view()
        assert status_code == 403
        assert response.get_json()['error']['code'] == 'FORBIDDEN'

    def test_role_required_without_identity(self, app):
        view = role_required(['admin'])(self._view)
        with app.test_request_context('/'):
            _, status_code = view()
        assert status_code == 403

    def test_tenant_required(self, app):
        view = tenant_required(self._view)
        with app.test_request_context('/'):
            g.tenant_id = None
            _, status_code = view()
            assert status_code == 403

            g.tenant_id = uuid.uuid4()
            assert view() == 'ok'

    def test_staff_required_rejects_super_admin(self, app):
        view = staff_required(self._view)
        with app.test_request_context('/'):
            g.user_role = 'super_admin'
            g.tenant_id = None
            _, status_code = view()
        assert status_code == 403

    def test_validate_json_requires_json_body(self, app):
        view = validate_json()(self._view)
        with app.test_request_context('/', method='POST', data='x', content_type='text/plain'):
            response, status_code = view()
        assert status_code == 400
        assert 'application/json' in response.get_json()['error']['message']

    def test_validate_json_rejects_non_object(self, app):
        view = validate_json()(self._view)
        with app.test_request_context('/', method='POST', json=[1, 2]):
            _, status_code = view()
        assert status_code == 400

    def test_validate_json_missing_fields(self, app):
        view = validate_json(required_fields=['email', 'password'])(self._view)
        with app.test_request_context('/', method='POST', json={'email': 'a@b.com'}):
            response, status_code = view()
        assert status_code == 400
        assert response.get_json()['error']['details'] == {'missing_fields': ['password']}

    def test_validate_json_passes(self, app):
        view = validate_json(required_fields=['email'])(self._view)
        with app.test_request_context('/', method='POST', json={'email': 'a@b.com'}):
            assert view() == 'ok'
