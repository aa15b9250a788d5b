"""
Settings for the admin API test client.

- Loads connection details from environment variables
- Optional .env file for local runs (skipped in test mode)
- Logging dictConfig shared by scripts and the pytest plugin
"""

import logging.config
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present (for local runs against a dev server)
if not os.environ.get("ADMIN_API_TEST_MODE"):
    load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


# =============================================================================
# SERVER CONNECTION (env-driven)
# =============================================================================

ADMIN_API_URL = os.environ.get("ADMIN_API_URL", "http://localhost:8065")

# Bearer token; when empty the client logs in with username/password instead
ADMIN_API_TOKEN = os.environ.get("ADMIN_API_TOKEN", "")

ADMIN_API_USERNAME = os.environ.get("ADMIN_API_USERNAME", "sysadmin")
ADMIN_API_PASSWORD = os.environ.get("ADMIN_API_PASSWORD", "Sys@dmin-sample1")

ADMIN_API_TIMEOUT_SECONDS = float(os.environ.get("ADMIN_API_TIMEOUT_SECONDS", "30"))


# =============================================================================
# FIXTURES
# =============================================================================

ADMIN_API_FIXTURES_DIR = Path(
    os.environ.get(
        "ADMIN_API_FIXTURES_DIR",
        str(BASE_DIR / "tests" / "fixtures" / "files"),
    )
)

ADMIN_API_LICENSE_FIXTURE = os.environ.get(
    "ADMIN_API_LICENSE_FIXTURE",
    "mattermost-license.txt",
)


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "adminapi": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def configure_logging() -> None:
    """Apply LOGGING via dictConfig."""
    logging.config.dictConfig(LOGGING)
