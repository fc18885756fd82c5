"""
Unit Tests for Marshmallow Schemas

Validation rules and normalization of request payloads.
"""

import uuid
from datetime import date, time, timezone

import pytest
from marshmallow import ValidationError

from fitcoach.schemas.auth_schema import register_schema, login_schema, activate_account_schema
from fitcoach.schemas.assessment_schema import assessment_create_schema, assessment_preview_schema
from fitcoach.schemas.billing_schema import delete_account_schema
from fitcoach.schemas.chat_schema import send_message_schema
from fitcoach.schemas.schedule_schema import recurring_slots_schema, slot_create_schema
from fitcoach.schemas.student_schema import student_create_schema, student_update_schema
from fitcoach.schemas.workout_schema import workout_create_schema, workout_log_create_schema


class TestAuthSchemas:

    def test_register_normalizes_email(self):
        data = register_schema.load({
            'full_name': '  Ana Souza ',
            'email': 'Ana@Example.COM',
            'password': 'SecurePass123',
        })
        assert data['email'] == 'ana@example.com'
        assert data['full_name'] == 'Ana Souza'
        assert data['business_name'] is None

    @pytest.mark.parametrize('password', ['short1', 'allletters', '12345678'])
    def test_register_rejects_weak_passwords(self, password):
        with pytest.raises(ValidationError) as exc:
            register_schema.load({'full_name': 'Ana', 'email': 'ana@example.com', 'password': password})
        assert 'password' in exc.value.messages

    def test_login_requires_valid_email(self):
        with pytest.raises(ValidationError) as exc:
            login_schema.load({'email': 'not-an-email', 'password': 'x'})
        assert 'email' in exc.value.messages

    def test_activation_requires_token_and_password(self):
        with pytest.raises(ValidationError) as exc:
            activate_account_schema.load({})
        assert set(exc.value.messages) == {'token', 'password'}


class TestStudentSchemas:

    def test_create_defaults_and_normalization(self):
        data = student_create_schema.load({'full_name': 'Carla Dias', 'email': 'CARLA@example.com'})
        assert data['email'] == 'carla@example.com'
        assert data['trainer_id'] is None
        assert data['gender'] is None

    def test_create_rejects_unknown_gender(self):
        with pytest.raises(ValidationError) as exc:
            student_create_schema.load({'full_name': 'Carla', 'email': 'c@example.com', 'gender': 'X'})
        assert 'gender' in exc.value.messages

    def test_update_does_not_accept_email(self):
        with pytest.raises(ValidationError) as exc:
            student_update_schema.load({'email': 'new@example.com'})
        assert 'email' in exc.value.messages

    def test_update_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            student_update_schema.load({'enrollment_status': 'graduated'})


class TestWorkoutSchemas:

    def test_exercise_defaults(self):
        data = workout_create_schema.load({'name': 'Upper A', 'exercises': [{'name': 'Bench press'}]})

        exercise = data['exercises'][0]
        assert exercise['sets'] == 3
        assert exercise['reps'] == '12'
        assert exercise['weight'] == 0
        assert exercise['rest_seconds'] == 60
        assert data['student_id'] is None

    def test_log_rating_range(self):
        with pytest.raises(ValidationError) as exc:
            workout_log_create_schema.load({'workout_name': 'Upper A', 'rating': 6})
        assert 'rating' in exc.value.messages

    def test_log_naive_timestamp_is_utc(self):
        data = workout_log_create_schema.load({'workout_name': 'Upper A', 'performed_at': '2024-05-06T07:45:00'})
        assert data['performed_at'].tzinfo == timezone.utc


class TestAssessmentSchemas:

    def test_create_requires_weight_height_and_date(self):
        with pytest.raises(ValidationError) as exc:
            assessment_create_schema.load({'student_id': str(uuid.uuid4())})
        assert {'weight', 'height', 'assessed_on'} <= set(exc.value.messages)

    def test_derived_metrics_are_not_accepted(self):
        with pytest.raises(ValidationError) as exc:
            assessment_create_schema.load({
                'student_id': str(uuid.uuid4()),
                'assessed_on': '2024-05-06',
                'weight': 70,
                'height': 175,
                'bmi': 10,
            })
        assert 'bmi' in exc.value.messages

    def test_preview_requires_gender(self):
        with pytest.raises(ValidationError) as exc:
            assessment_preview_schema.load({'weight': 70, 'height': 175})
        assert 'gender' in exc.value.messages


class TestScheduleSchemas:

    def test_recurring_payload(self):
        data = recurring_slots_schema.load({
            'start_date': '2024-05-06',
            'end_date': '2024-05-19',
            'weekdays': [1, 3],
            'times': ['07:00', '18:30'],
        })
        assert data['start_date'] == date(2024, 5, 6)
        assert data['times'] == [time(7, 0), time(18, 30)]
        assert data['type'] == 'workout'

    def test_recurring_rejects_weekday_out_of_range(self):
        with pytest.raises(ValidationError) as exc:
            recurring_slots_schema.load({
                'start_date': '2024-05-06', 'end_date': '2024-05-06', 'weekdays': [7], 'times': ['07:00'],
            })
        assert 'weekdays' in exc.value.messages

    def test_recurring_range_limited_to_one_year(self):
        with pytest.raises(ValidationError) as exc:
            recurring_slots_schema.load({
                'start_date': '2024-01-01', 'end_date': '2025-06-01', 'weekdays': [1], 'times': ['07:00'],
            })
        assert 'end_date' in exc.value.messages

    def test_slot_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            slot_create_schema.load({'date': '2024-05-06', 'time': '07:00', 'status': 'open'})


class TestMiscSchemas:

    def test_blank_message_rejected(self):
        with pytest.raises(ValidationError) as exc:
            send_message_schema.load({'content': '   '})
        assert 'content' in exc.value.messages

    def test_delete_account_requires_literal_confirmation(self):
        with pytest.raises(ValidationError):
            delete_account_schema.load({'confirmation': 'delete'})
        assert delete_account_schema.load({'confirmation': 'DELETE'}) == {'confirmation': 'DELETE'}
