"""
Automatic message template rendering.

Templates contain literal placeholders such as ``{name}``. Substitution is a
plain string replacement (not ``str.format``), so unknown braces and format
specifiers in trainer-written text are left untouched.
"""

from typing import Dict, List, Mapping, Optional, Any

VARIABLE_DEFAULTS: Dict[str, str] = {
    'name': 'Student',
    'time': '--:--',
    'day': 'today',
    'workout': 'Workout',
    'streak': '0',
    'trainer': 'Trainer',
}

VARIABLE_DESCRIPTIONS: Dict[str, str] = {
    'name': "Student's first name",
    'time': 'Session time (HH:MM)',
    'day': 'Session day',
    'workout': 'Workout name',
    'streak': 'Consecutive training days',
    'trainer': "Trainer's name",
}


def replace_variables(template: Optional[str], variables: Optional[Mapping[str, Any]] = None) -> str:
    """
    Replace every occurrence of each known placeholder.

    Missing or empty values fall back to the placeholder's default.

    Example:
        >>> replace_variables('Hi {name}, see you at {time}!', {'name': 'Ana'})
        'Hi Ana, see you at --:--!'
    """
    if not template:
        return ''

    variables = variables or {}
    result = template
    for key, default in VARIABLE_DEFAULTS.items():
        value = variables.get(key)
        if value is None or value == '':
            value = default
        result = result.replace('{' + key + '}', str(value))
    return result


def get_variables_description() -> List[Dict[str, str]]:
    """Placeholders available to template authors, in display order."""
    return [
        {'variable': '{' + key + '}', 'description': description}
        for key, description in VARIABLE_DESCRIPTIONS.items()
    ]
