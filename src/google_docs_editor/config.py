"""
Runtime configuration for Google Docs Editor.

All settings come from environment variables so the server can be configured
the same way locally and inside a container.
"""

import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


# Credentials live in /workspace/credentials in Docker, ./credentials locally
if os.environ.get("GOOGLE_DOCS_CREDENTIALS_DIR"):
    CREDENTIALS_DIR = Path(os.environ["GOOGLE_DOCS_CREDENTIALS_DIR"])
elif os.getenv("DOCKER_ENV"):
    CREDENTIALS_DIR = Path("/workspace/credentials")
else:
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    CREDENTIALS_DIR = PROJECT_ROOT / "credentials"

TOKEN_PATH = CREDENTIALS_DIR / "token.json"
CREDENTIALS_PATH = CREDENTIALS_DIR / "credentials.json"

SERVICE_ACCOUNT_PATH = os.environ.get("SERVICE_ACCOUNT_PATH")

OAUTH_PORT = _env_int("GOOGLE_DOCS_OAUTH_PORT", 3000)

# Ceiling on requests per batchUpdate call. Batches are never auto-chunked.
MAX_BATCH_REQUESTS = _env_int("GOOGLE_DOCS_MAX_BATCH_REQUESTS", 50)

# Check image URLs with a HEAD request before asking Docs to fetch them
VERIFY_IMAGE_URLS = _env_bool("GOOGLE_DOCS_VERIFY_IMAGE_URLS", True)
