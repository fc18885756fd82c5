"""
Unit tests for session reminders and the background tasks.
"""

from datetime import date, datetime, time, timezone

import pytest

from fitcoach.models import AutoMessageConfig, Notification, ScheduleSlot
from fitcoach.services.reminder_service import ReminderService
from fitcoach.tasks import health_check, send_session_reminders

NOW = datetime(2024, 5, 6, 7, 50, tzinfo=timezone.utc)


@pytest.fixture
def booked_slot(session, trainer, student):
    def make(slot_time, status='booked', slot_date=date(2024, 5, 6)):
        slot = ScheduleSlot(
            tenant_id=student.tenant_id,
            trainer_id=trainer.id,
            student_id=student.id if status == 'booked' else None,
            date=slot_date,
            time=slot_time,
            status=status,
        )
        session.add(slot)
        session.commit()
        return slot
    return make


class TestReminderService:

    def test_reminds_sessions_inside_window(self, booked_slot, student):
        slot = booked_slot(time(8, 0))

        sent = ReminderService.send_session_reminders(now=NOW)

        assert sent == 1
        notification = Notification.query.filter_by(user_id=student.user_id).one()
        assert notification.type == 'reminder'
        assert notification.reference_id == str(slot.id)
        assert notification.message == 'Hi Carla! Your session with Bruno Lima starts at 08:00. Get ready!'

    def test_ignores_sessions_outside_window(self, booked_slot):
        booked_slot(time(8, 30))
        booked_slot(time(7, 30))
        booked_slot(time(8, 0), slot_date=date(2024, 5, 7))

        assert ReminderService.send_session_reminders(now=NOW) == 0

    def test_ignores_open_slots(self, booked_slot):
        booked_slot(time(8, 0), status='available')
        assert ReminderService.send_session_reminders(now=NOW) == 0

    def test_overlapping_runs_remind_once(self, booked_slot, student):
        booked_slot(time(8, 0))

        assert ReminderService.send_session_reminders(now=NOW) == 1
        assert ReminderService.send_session_reminders(now=NOW.replace(minute=55)) == 0
        assert Notification.query.filter_by(user_id=student.user_id).count() == 1

    def test_disabled_for_tenant(self, session, booked_slot, tenant):
        session.add(AutoMessageConfig(tenant_id=tenant.id, reminder_now_active=False))
        session.commit()
        booked_slot(time(8, 0))

        assert ReminderService.send_session_reminders(now=NOW) == 0

    def test_window_crosses_midnight(self, booked_slot, student):
        slot = booked_slot(time(0, 5), slot_date=date(2024, 5, 7))
        booked_slot(time(0, 30), slot_date=date(2024, 5, 7))

        sent = ReminderService.send_session_reminders(now=datetime(2024, 5, 6, 23, 55, tzinfo=timezone.utc))

        assert sent == 1
        assert Notification.query.filter_by(user_id=student.user_id).one().reference_id == str(slot.id)

    def test_naive_now_is_treated_as_utc(self, booked_slot):
        booked_slot(time(8, 0))
        assert ReminderService.send_session_reminders(now=NOW.replace(tzinfo=None)) == 1


class TestTasks:

    def test_send_session_reminders_task(self, app, mocker):
        service = mocker.patch.object(ReminderService, 'send_session_reminders', return_value=3)

        result = send_session_reminders()

        service.assert_called_once()
        assert result['sent'] == 3
        assert 'timestamp' in result

    def test_health_check_without_redis(self, app):
        result = health_check()

        assert result['components']['database']['status'] == 'healthy'
        assert result['components']['redis']['status'] == 'warning'
        assert result['overall'] == {'status': 'healthy', 'unhealthy_components': []}

    def test_health_check_reports_redis_failure(self, app, mocker):
        import redis
        from fitcoach.extensions import redis_manager

        client = mocker.Mock()
        client.ping.side_effect = redis.ConnectionError('connection refused')
        mocker.patch.object(redis_manager, 'get_client', return_value=client)

        result = health_check()

        assert result['components']['redis']['status'] == 'unhealthy'
        assert result['overall']['unhealthy_components'] == ['redis']
