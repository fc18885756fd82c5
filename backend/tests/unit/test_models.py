"""
Unit Tests for Database Models
"""

import uuid
from datetime import date, time, timedelta

import pytest

from fitcoach.models import (
    ActivationToken, ScheduleSlot, Student, Tenant, User, WorkoutRoutine, Exercise,
)
from fitcoach.models.base import utcnow


class TestUserModel:

    def test_password_hashing(self, session, tenant):
        user = User(full_name='Test', email='test@example.com', role='trainer', tenant_id=tenant.id)
        user.set_password('SecurePass123')

        assert user.password_hash != 'SecurePass123'
        assert user.check_password('SecurePass123')
        assert not user.check_password('WrongPass123')

    def test_short_password_rejected(self):
        user = User(full_name='Test', email='test@example.com')
        with pytest.raises(ValueError):
            user.set_password('short')

    def test_find_by_email_is_case_insensitive(self, admin):
        assert User.find_by_email('  ANA@IronGym.com ') == admin

    def test_to_dict_hides_password_hash(self, admin):
        data = admin.to_dict()
        assert 'password_hash' not in data
        assert data['id'] == str(admin.id)
        assert data['tenant_id'] == str(admin.tenant_id)

    def test_role_helpers(self, admin, super_admin):
        assert admin.is_staff and not admin.is_super_admin
        assert super_admin.is_super_admin and not super_admin.is_staff


class TestTenantModel:

    def test_generate_slug(self):
        slug = Tenant.generate_slug('Iron Gym SP!')
        assert slug.startswith('iron-gym-sp-')
        assert slug != Tenant.generate_slug('Iron Gym SP!')

    def test_owner_lookup(self, tenant, admin, trainer):
        assert tenant.get_owner() == admin

    def test_status(self, session, tenant):
        assert tenant.is_active
        tenant.status = 'suspended'
        assert not tenant.is_active


class TestTenantScoping:

    def test_for_tenant_excludes_other_tenants_and_deleted(self, session, tenant, other_tenant):
        live = Student(tenant_id=tenant.id, full_name='Live', email='live@example.com')
        deleted = Student(tenant_id=tenant.id, full_name='Gone', email='gone@example.com')
        foreign = Student(tenant_id=other_tenant.id, full_name='Other', email='other@example.com')
        session.add_all([live, deleted, foreign])
        session.flush()
        deleted.soft_delete()
        session.commit()

        assert Student.for_tenant(tenant.id).all() == [live]
        assert Student.get_for_tenant(foreign.id, tenant.id) is None
        assert Student.get_for_tenant(live.id, tenant.id) == live

    def test_soft_delete_sets_timestamp(self, session, tenant):
        student = Student(tenant_id=tenant.id, full_name='Live', email='live@example.com')
        assert not student.is_deleted
        student.soft_delete()
        assert student.is_deleted


class TestActivationToken:

    def test_issue_and_expiry(self, session, student):
        token = ActivationToken.issue(student.id, ttl_hours=24)
        session.add(token)
        session.commit()

        assert len(token.token) >= 32
        assert not token.is_expired
        assert not token.is_used

        token.expires_at = utcnow() - timedelta(minutes=1)
        assert token.is_expired


class TestWorkoutModels:

    def test_exercise_copy_is_detached(self, session, tenant, trainer):
        workout = WorkoutRoutine(tenant_id=tenant.id, trainer_id=trainer.id, is_template=True, name='Upper A')
        workout.exercises = [Exercise(position=0, name='Bench press', sets=4, reps='8-10', weight=60)]
        session.add(workout)
        session.commit()

        copy = workout.exercises[0].copy()

        assert copy.id is None
        assert copy.name == 'Bench press'
        assert copy.reps == '8-10'
        assert copy.workout_id is None

    def test_to_dict_with_exercises(self, session, tenant, trainer):
        workout = WorkoutRoutine(tenant_id=tenant.id, trainer_id=trainer.id, is_template=True, name='Upper A')
        workout.exercises = [
            Exercise(position=1, name='Row'),
            Exercise(position=0, name='Bench press'),
        ]
        session.add(workout)
        session.commit()

        data = workout.to_dict(include_exercises=True)
        assert [e['name'] for e in data['exercises']] == ['Bench press', 'Row']


def test_slot_serializes_time_as_hh_mm(session, tenant):
    slot = ScheduleSlot(tenant_id=tenant.id, date=date(2024, 5, 6), time=time(7, 0), id=uuid.uuid4())
    data = slot.to_dict()
    assert data['date'] == '2024-05-06'
    assert data['time'] == '07:00'
