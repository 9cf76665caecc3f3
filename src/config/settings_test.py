"""Settings for the test suite.

Supplies the values ``config.settings`` refuses to guess and swaps the
database for in-memory SQLite.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from config.settings import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

ORDERS_SEED_COUNT = 2
