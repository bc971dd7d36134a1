"""
Django settings for Pressroom, a small blog with a JSON API.
"""

import os
import sys
from pathlib import Path

import dj_database_url

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get(
    'DJANGO_SECRET_KEY',
    'django-insecure-change-me-in-production'
)

DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() in ('true', '1', 'yes')

TESTING = len(sys.argv) > 1 and sys.argv[1] == 'test'

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')

CSRF_TRUSTED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get('CSRF_TRUSTED_ORIGINS', '').split(',')
    if origin.strip()
]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # Pressroom apps
    'blog',
    'api',
    'backoffice',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    # Must run before anything under /admin/ is routed
    'backoffice.middleware.AdminBasicAuthMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# The toolbar refuses to run under the test runner, so only wire it up for
# local development.
if DEBUG and not TESTING:
    INSTALLED_APPS.insert(0, 'debug_toolbar')
    MIDDLEWARE.insert(0, 'debug_toolbar.middleware.DebugToolbarMiddleware')

INTERNAL_IPS = ['127.0.0.1']  # Required for django-debug-toolbar to work

ROOT_URLCONF = 'pressroom.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'pressroom.wsgi.application'
ASGI_APPLICATION = 'pressroom.asgi.application'

# Database: DATABASE_URL wins when set; falls back to SQLite locally
DATABASES = {
    'default': dj_database_url.config(
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static']
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------
BLOG_POSTS_PER_PAGE = int(os.environ.get('BLOG_POSTS_PER_PAGE', '6'))

# Field the slug is derived from: 'title' or 'summary'.
BLOG_SLUG_SOURCE_FIELD = os.environ.get('BLOG_SLUG_SOURCE_FIELD', 'title')

# When on, the slug follows the source field on every save.
BLOG_REGENERATE_SLUG_ON_SAVE = os.environ.get(
    'BLOG_REGENERATE_SLUG_ON_SAVE', 'True'
).lower() in ('true', '1', 'yes')

# The JSON API lists drafts too unless this is switched off.
BLOG_API_INCLUDE_UNPUBLISHED = os.environ.get(
    'BLOG_API_INCLUDE_UNPUBLISHED', 'True'
).lower() in ('true', '1', 'yes')

# ---------------------------------------------------------------------------
# Admin gate (HTTP basic auth over the /admin/ namespace)
# ---------------------------------------------------------------------------
# No password means the gate refuses everyone.
ADMIN_GATE_PATH_PREFIX = os.environ.get('ADMIN_GATE_PATH_PREFIX', '/admin/')
ADMIN_BASIC_AUTH_USERNAME = os.environ.get('ADMIN_BASIC_AUTH_USERNAME', 'admin')
ADMIN_BASIC_AUTH_PASSWORD = os.environ.get('ADMIN_BASIC_AUTH_PASSWORD', '')
ADMIN_BASIC_AUTH_REALM = os.environ.get('ADMIN_BASIC_AUTH_REALM', 'Pressroom Admin')

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django.db.backends': {
            'handlers': ['console'],
            # Set to DEBUG when actively investigating query counts.
            'level': 'WARNING',
            'propagate': False,
        },
        'blog': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'api': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'backoffice': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}
