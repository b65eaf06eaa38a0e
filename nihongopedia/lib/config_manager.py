"""Settings lookup: .env → environment → defaults.

Usage:
    from nihongopedia.lib.config_manager import config

    origin = config.get("CONTENT_ORIGIN")
    ttl_days = config.get("CACHE_TTL_DAYS")  # int, coerced from the env string

Values read from the environment are strings; they are converted to the
type of the matching entry in ``defaults.DEFAULTS``. A value that does not
convert is ignored in favour of the default.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from nihongopedia.lib.defaults import DEFAULTS, get_default

logger = logging.getLogger(__name__)

TRUTHY = frozenset({"true", "1", "yes", "on"})


def _find_git_root(start_path: Optional[Path] = None) -> Path:
    """Return the closest ancestor containing a .git entry."""
    start = (start_path or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if (candidate / ".git").exists():
            return candidate
    raise FileNotFoundError(f"No .git directory above {start}")


def _coerce_type(value: str, default: Any) -> Any:
    """Convert an env string to the type of ``default``.

    bool is checked before int since bool subclasses int. Unparseable
    numbers yield ``default``; unknown types pass the string through.
    """
    if isinstance(default, bool):
        return value.strip().lower() in TRUTHY
    for numeric in (int, float):
        if isinstance(default, numeric):
            try:
                return numeric(value)
            except ValueError:
                logger.warning(f"Ignoring non-{numeric.__name__} setting {value!r}; using {default!r}")
                return default
    return value


class ConfigManager:
    """Resolve settings from a .env file, the environment and DEFAULTS.

    The .env file is read once, at construction, and never overrides
    variables already set in the process environment.
    """

    def __init__(self, env_path: Optional[Path] = None):
        """Load settings.

        Args:
            env_path: .env to read (defaults to the one at the git root;
                a missing file is not an error)
        """
        self.env_path = env_path if env_path is not None else self._default_env_path()
        if self.env_path is not None and self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Read settings from {self.env_path}")

    @staticmethod
    def _default_env_path() -> Optional[Path]:
        try:
            return _find_git_root() / ".env"
        except FileNotFoundError:
            logger.debug("Not inside a git checkout; skipping .env")
            return None

    def get(self, key: str, default: Any = None) -> Any:
        """Look up one setting.

        Args:
            key: Setting name, e.g. "CACHE_TTL_DAYS"
            default: Fallback (and coercion target) overriding DEFAULTS

        Returns:
            The coerced environment value, else ``default``, else the
            DEFAULTS entry (None for unknown keys)
        """
        fallback = default if default is not None else get_default(key)
        raw = os.environ.get(key)
        if raw is None:
            return fallback
        return _coerce_type(raw, fallback)

    def get_all(self) -> dict[str, Any]:
        """Resolve every setting named in DEFAULTS."""
        return {key: self.get(key) for key in DEFAULTS}


config = ConfigManager()
