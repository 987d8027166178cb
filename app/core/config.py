import os
from dataclasses import dataclass
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = REPO_ROOT / "app" / "data" / "articles.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default

def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

def _env_level(name: str, default: str) -> str:
    level = os.getenv(name, default).strip().upper()
    return level if level in LOG_LEVELS else default

@dataclass(frozen=True)
class Settings:
    data_path: Path = DEFAULT_DATA_PATH
    default_limit: int = 10
    max_limit: int = 100
    include_future: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        default_limit = _env_int("SEARCH_DEFAULT_LIMIT", 10)
        max_limit = _env_int("SEARCH_MAX_LIMIT", 100)
        if max_limit < 1:
            max_limit = 100
        if not 1 <= default_limit <= max_limit:
            default_limit = min(10, max_limit)

        return cls(
            data_path=Path(os.getenv("SEARCH_DATA_PATH", str(DEFAULT_DATA_PATH))),
            default_limit=default_limit,
            max_limit=max_limit,
            include_future=_env_bool("SEARCH_INCLUDE_FUTURE", False),
            log_level=_env_level("SEARCH_LOG_LEVEL", "INFO"),
        )
