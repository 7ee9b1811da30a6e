"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "chatsession.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_MAX_TOKENS = 1024


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def default_model() -> str:
    """Model name from CHAT_MODEL, falling back to DEFAULT_MODEL."""
    return os.getenv("CHAT_MODEL") or DEFAULT_MODEL


def default_max_tokens() -> int:
    """Token limit from CHAT_MAX_TOKENS, falling back to DEFAULT_MAX_TOKENS."""
    value = os.getenv("CHAT_MAX_TOKENS")
    return int(value) if value else DEFAULT_MAX_TOKENS
