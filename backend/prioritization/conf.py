"""
App settings for the prioritization app.

Values come from the `AGENTA` dict in Django settings, falling back to
DEFAULTS for any key that is not set there.
"""

from django.conf import settings

DEFAULTS = {
    'DEFAULT_PERSONALITY': 'balanced',
    'DEFAULT_SORT': 'scheduling-weight-desc',
    'THROTTLE_RATES': {
        'analyze': '30/min',
        'profile': '20/min',
    },
}


def get_setting(name: str):
    """
    Return an app setting.

    Raises:
        KeyError: for names that have no default.
    """
    user_settings = getattr(settings, 'AGENTA', {})
    if name in user_settings:
        return user_settings[name]
    return DEFAULTS[name]
