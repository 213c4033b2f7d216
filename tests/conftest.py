"""Test configuration for the book store."""

import os

# Must run before src.bookstore.runtime.context loads config.yaml
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE", "")

from tests.fixtures import *  # noqa: E402,F401,F403
