# PATH: apps/api/config/settings/test.py
from .base import *

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

PROMOTION_DEFAULT_REQUIRED_CREDITS = 60
PROMOTION_PASSING_GRADE = 10.0
PROMOTION_COMPENSABLE_THRESHOLD = 8.0

LOGGING["root"]["level"] = "WARNING"
LOGGING["loggers"]["apps.domains"]["level"] = "WARNING"
