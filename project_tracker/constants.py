from __future__ import annotations


# -----------------------------------------------------------------------------
# Identifier prefixes
# -----------------------------------------------------------------------------

PERSON_PREFIX = "person"
TAG_PREFIX = "tag"
PROJECT_PREFIX = "project"
TASK_PREFIX = "task"

# Separator between the kind prefix and the ULID token ("project-01J...")
ID_SEPARATOR = "-"

# -----------------------------------------------------------------------------
# Web defaults (overridden by config.yml, then by TRACKER_* variables in Config.load_config)
# -----------------------------------------------------------------------------

API_PREFIX = "/api/v1"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_API_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
DEFAULT_CLIENT_TIMEOUT_SECONDS = 10.0

# -----------------------------------------------------------------------------
# Form limits used by the terminal client before submission
# -----------------------------------------------------------------------------

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

# Logging
DEFAULT_LOG_FILE = "tracker.log"
LOG_MAX_BYTES = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT = 5
