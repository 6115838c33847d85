"""
Settings for the pytest suite.
"""

from .base import *  # noqa: F403,F405

ENVIRONMENT = "test"

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "level": "WARNING",
            "class": "logging.StreamHandler",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}

POS_PRICING = {
    "VAT_RATE": "12.00",
    "SENIOR_PWD_DISCOUNT_RATE": "20.00",
    "CURRENCY": "PHP",
    "CASH_LIMIT": "10000.00",
}

POS_RECEIPT = {
    "NAME": "Test Grocery",
    "ADDRESS": "123 Rizal Avenue, Manila",
    "TIN": "000-123-456-000",
}
