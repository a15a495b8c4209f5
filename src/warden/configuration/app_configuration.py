from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from warden.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_DB_PATH = "./data/warden.db"
DEFAULT_INVITE_PATTERN = r"discord\.gg/([a-zA-Z0-9]+)"
DEFAULT_COLORS: Dict[str, str] = {
    "success": "#57F287",
    "warning": "#FEE75C",
    "error": "#ED4245",
    "primary": "#5865F2",
}


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml`` and exposes typed
    properties for every pipeline knob. Missing keys (or a missing file) fall
    back to defaults so the pipeline can always start.
    """

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
        return {}

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Re-read the YAML file and replace the in-memory cache."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """The cached mapping. Callers must not mutate it."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def database_path(self) -> Path:
        """Location of the SQLite store."""
        return Path(str(self._section("database").get("path", DEFAULT_DB_PATH))).resolve()

    @property
    def moderator_level(self) -> int:
        """Permission level at and above which link policy is not enforced."""
        return int(self._section("pipeline").get("moderator_level", 3))

    @property
    def autoslow_max_level(self) -> int:
        """Messages from authors below this level feed the auto slow-mode controller."""
        return int(self._section("pipeline").get("autoslow_max_level", 1))

    @property
    def autoslow_observation_interval(self) -> float:
        """Width of the rolling message window, in seconds."""
        return float(self._section("autoslow").get("observation_interval_seconds", 10.0))

    @property
    def fire_on_first_match(self) -> bool:
        """Whether an unarmed trigger replies on its first match instead of arming.

        Defaults to False: the first qualifying message only arms the trigger.
        """
        return bool(self._section("triggers").get("fire_on_first_match", False))

    @property
    def opt_out_label(self) -> str:
        return str(self._section("triggers").get("opt_out_label", "Don't remind me again"))

    @property
    def invite_pattern(self) -> str:
        """Regular expression whose first group captures an invite code."""
        return str(self._section("invites").get("pattern", DEFAULT_INVITE_PATTERN))

    @property
    def colors(self) -> Dict[str, str]:
        """Embed colors keyed by kind (success, warning, error, primary)."""
        merged = dict(DEFAULT_COLORS)
        merged.update({str(k): str(v) for k, v in self._section("colors").items()})
        return merged
