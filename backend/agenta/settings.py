"""
Django settings for the agenta project.

All deployment-specific values can be overridden via environment variables:
    DJANGO_SECRET_KEY     Secret key (a development key is used if unset)
    DJANGO_DEBUG          "1"/"true"/"yes" to enable debug mode
    DJANGO_ALLOWED_HOSTS  Comma-separated host names
    AGENTA_DB_PATH        Path of the SQLite database file
    AGENTA_LOG_LEVEL      Log level for the prioritization app (default INFO)
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _get_env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_list(name: str, default: list) -> list:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-agenta-development-key')

DEBUG = _get_env_bool('DJANGO_DEBUG', True)

ALLOWED_HOSTS = _get_env_list('DJANGO_ALLOWED_HOSTS', ['localhost', '127.0.0.1', 'testserver'])


# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'drf_spectacular',
    'prioritization',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
]

ROOT_URLCONF = 'agenta.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'agenta.wsgi.application'


# Database

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('AGENTA_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Internationalization

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'


# REST framework

REST_FRAMEWORK = {
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
    'UNAUTHENTICATED_USER': None,
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Agenta Prioritization API',
    'DESCRIPTION': 'Personalized task scoring, calibration and scheduling.',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}


# Logging

LOG_LEVEL = os.getenv('AGENTA_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'loggers': {
        'agenta': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'prioritization': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
    },
}


# Prioritization app settings (see prioritization/conf.py for defaults)

AGENTA = {
    'DEFAULT_PERSONALITY': os.getenv('AGENTA_DEFAULT_PERSONALITY', 'balanced'),
    'DEFAULT_SORT': 'scheduling-weight-desc',
    'THROTTLE_RATES': {
        'analyze': os.getenv('AGENTA_ANALYZE_RATE', '30/min'),
        'profile': os.getenv('AGENTA_PROFILE_RATE', '20/min'),
    },
}
