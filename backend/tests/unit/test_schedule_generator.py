"""
Unit Tests for recurring slot generation and workout streaks.
"""

from datetime import date, time

from fitcoach.services.schedule_service import client_weekday, generate_recurring_slots, serialize_draft
from fitcoach.services.workout_log_service import calculate_streak

MONDAY = date(2024, 5, 6)
SUNDAY = date(2024, 5, 5)


class TestClientWeekday:

    def test_sunday_is_zero(self):
        assert client_weekday(SUNDAY) == 0

    def test_monday_is_one(self):
        assert client_weekday(MONDAY) == 1

    def test_saturday_is_six(self):
        assert client_weekday(date(2024, 5, 11)) == 6


class TestGenerateRecurringSlots:

    def test_single_matching_day_single_time(self):
        drafts = generate_recurring_slots(MONDAY, MONDAY, [1], [time(7, 0)])

        assert len(drafts) == 1
        assert drafts[0]['date'] == MONDAY
        assert drafts[0]['time'] == time(7, 0)
        assert drafts[0]['status'] == 'available'
        assert drafts[0]['type'] == 'workout'

    def test_non_matching_weekday(self):
        assert generate_recurring_slots(MONDAY, MONDAY, [0], [time(7, 0)]) == []

    def test_end_before_start(self):
        assert generate_recurring_slots(MONDAY, SUNDAY, [0, 1], [time(7, 0)]) == []

    def test_empty_selection(self):
        assert generate_recurring_slots(MONDAY, MONDAY, [], [time(7, 0)]) == []
        assert generate_recurring_slots(MONDAY, MONDAY, [1], []) == []

    def test_cartesian_product_over_two_weeks(self):
        # Mondays and Wednesdays between 2024-05-06 and 2024-05-19, two times each
        drafts = generate_recurring_slots(
            MONDAY, date(2024, 5, 19), [1, 3], [time(18, 0), time(7, 0)],
            slot_type='class', title='Functional'
        )

        assert len(drafts) == 8
        assert {client_weekday(d['date']) for d in drafts} == {1, 3}
        assert all(d['type'] == 'class' and d['title'] == 'Functional' for d in drafts)

    def test_times_sorted_and_deduplicated(self):
        drafts = generate_recurring_slots(MONDAY, MONDAY, [1], [time(18, 0), time(7, 0), time(18, 0)])
        assert [d['time'] for d in drafts] == [time(7, 0), time(18, 0)]

    def test_serialize_draft(self):
        draft = generate_recurring_slots(MONDAY, MONDAY, [1], [time(7, 30)])[0]

        data = serialize_draft(draft)

        assert data['date'] == '2024-05-06'
        assert data['time'] == '07:30'
        assert data['weekday'] == 1


class TestCalculateStreak:

    def test_consecutive_days_ending_today(self):
        days = [MONDAY, SUNDAY, date(2024, 5, 4)]
        assert calculate_streak(days, MONDAY) == 3

    def test_run_ending_yesterday_still_counts(self):
        assert calculate_streak([SUNDAY, date(2024, 5, 4)], MONDAY) == 2

    def test_broken_streak(self):
        assert calculate_streak([date(2024, 5, 3)], MONDAY) == 0

    def test_duplicate_days_count_once(self):
        assert calculate_streak([MONDAY, MONDAY, SUNDAY], MONDAY) == 2

    def test_no_logs(self):
        assert calculate_streak([], MONDAY) == 0
