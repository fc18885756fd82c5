"""
Test Configuration and Fixtures

This module provides pytest fixtures and configuration for the test suite.
Fixtures are reusable test resources that can be injected into test functions.

Key fixtures:
- app: Flask application with test configuration and a fresh in-memory database
- client: Flask test client for making HTTP requests
- session: Database session of the test
- tenant, admin, trainer, student, super_admin: Sample records
- *_headers: Authentication headers with a JWT for each role
"""

import pytest
from datetime import timedelta
from flask_jwt_extended import create_access_token

from fitcoach import create_app
from fitcoach.extensions import db as _db
from fitcoach.models import Tenant, User, Student
from fitcoach.services.auth_service import TOKEN_BLACKLIST


@pytest.fixture(scope='function')
def app():
    """
    Create Flask application for testing.

    Scope: function - every test gets its own application and empty database
    (SQLite in memory), so no state leaks between tests.
    """
    app = create_app('testing')

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(autouse=True)
def clear_token_blacklist():
    """The in-memory blocklist is module state; reset it around every test."""
    TOKEN_BLACKLIST.clear()
    yield
    TOKEN_BLACKLIST.clear()


@pytest.fixture(scope='function')
def session(app):
    return _db.session


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture(scope='function')
def tenant(session):
    tenant = Tenant(name='Iron Gym', slug='iron-gym', type='academy', plan='pro', status='active')
    session.add(tenant)
    session.commit()
    return tenant


@pytest.fixture(scope='function')
def admin(session, tenant):
    """Owner admin of the tenant."""
    user = User(
        full_name='Ana Souza',
        email='ana@irongym.com',
        role='admin',
        tenant_id=tenant.id,
        is_owner=True,
        is_active=True
    )
    user.set_password('AdminPass123')
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def trainer(session, tenant):
    user = User(
        full_name='Bruno Lima',
        email='bruno@irongym.com',
        role='trainer',
        tenant_id=tenant.id,
        is_active=True
    )
    user.set_password('TrainerPass123')
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def student_user(session, tenant):
    user = User(
        full_name='Carla Dias',
        email='carla@example.com',
        role='student',
        tenant_id=tenant.id,
        is_active=True
    )
    user.set_password('StudentPass123')
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def student(session, tenant, trainer, student_user):
    """Active student with a login, assigned to the trainer."""
    student = Student(
        tenant_id=tenant.id,
        user_id=student_user.id,
        trainer_id=trainer.id,
        full_name='Carla Dias',
        email='carla@example.com',
        enrollment_status='active',
        age=30,
        gender='F',
        weight=62.0,
        height=165.0
    )
    session.add(student)
    session.commit()
    return student


@pytest.fixture(scope='function')
def super_admin(session):
    user = User(
        full_name='Platform Admin',
        email='root@fitcoach.app',
        role='super_admin',
        is_active=True
    )
    user.set_password('RootPass123')
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def other_tenant(session):
    tenant = Tenant(name='Other Gym', slug='other-gym', type='academy', plan='starter', status='active')
    session.add(tenant)
    session.commit()
    return tenant


def make_headers(user):
    """Authorization headers carrying the same claims AuthService issues."""
    token = create_access_token(
        identity=str(user.id),
        additional_claims={
            'role': user.role,
            'tenant_id': str(user.tenant_id) if user.tenant_id else None,
        },
        expires_delta=timedelta(minutes=15)
    )
    return {
        'Authorization': f'Bearer {token}',
        'Content-Type': 'application/json'
    }


@pytest.fixture(scope='function')
def admin_headers(admin):
    return make_headers(admin)


@pytest.fixture(scope='function')
def trainer_headers(trainer):
    return make_headers(trainer)


@pytest.fixture(scope='function')
def student_headers(student):
    return make_headers(student.user)


@pytest.fixture(scope='function')
def super_admin_headers(super_admin):
    return make_headers(super_admin)


def assert_success_response(response, status_code=200):
    """Assert the success envelope and return its data."""
    assert response.status_code == status_code, response.get_json()
    body = response.get_json()
    assert body['success'] is True
    return body.get('data')


def assert_error_response(response, status_code, error_code=None):
    """Assert the error envelope and return its error object."""
    assert response.status_code == status_code, response.get_json()
    body = response.get_json()
    assert body['success'] is False
    if error_code:
        assert body['error']['code'] == error_code
    return body['error']
