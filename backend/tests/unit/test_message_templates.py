"""
Unit Tests for automatic message template rendering.
"""

from fitcoach.utils.message_templates import replace_variables, get_variables_description


class TestReplaceVariables:

    def test_replaces_every_occurrence(self):
        result = replace_variables('{name}, {name}! {workout} at {time}', {
            'name': 'Ana', 'workout': 'Leg day', 'time': '07:00',
        })
        assert result == 'Ana, Ana! Leg day at 07:00'

    def test_missing_values_use_defaults(self):
        result = replace_variables('{name} {time} {day} {workout} {streak} {trainer}')
        assert result == 'Student --:-- today Workout 0 Trainer'

    def test_empty_value_uses_default(self):
        assert replace_variables('Hi {name}', {'name': ''}) == 'Hi Student'

    def test_non_string_values_are_converted(self):
        assert replace_variables('{streak} days', {'streak': 7}) == '7 days'

    def test_unknown_placeholders_and_format_specs_left_untouched(self):
        template = 'Hi {name}, {unknown} {0} {name!r}'
        assert replace_variables(template, {'name': 'Ana'}) == 'Hi Ana, {unknown} {0} {name!r}'

    def test_empty_template(self):
        assert replace_variables(None, {'name': 'Ana'}) == ''
        assert replace_variables('', {}) == ''


def test_variables_description_lists_placeholders():
    variables = [item['variable'] for item in get_variables_description()]
    assert variables == ['{name}', '{time}', '{day}', '{workout}', '{streak}', '{trainer}']
