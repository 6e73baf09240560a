from .base import *

DEBUG = True
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS += [
    "debug_toolbar",
]

MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")

INTERNAL_IPS = [
    "127.0.0.1",
]

# 로컬 개발: DB 환경변수가 없으면 SQLite 파일 사용
if not os.getenv("DB_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

LOG_LEVEL = "DEBUG"
LOGGING["root"]["level"] = LOG_LEVEL
LOGGING["loggers"]["apps.domains"]["level"] = LOG_LEVEL
