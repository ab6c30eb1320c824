"""
Configuration profiles for Quake Log Tools

Settings live in JSON profiles under ``profiles/<name>.json``. A profile only
needs the keys it changes: it is layered over DEFAULT_SETTINGS, so every
recognized key always has a value.

Usage:
    from config import Config
    config = Config(profile='tournament')
    policy = config.get('report.missing_names')

Recognized keys:
    general.log_level             Logging level name (default "INFO")
    general.output_path           Directory for generated files (default "output")
    report.flush_trailing_match   Keep a final match that lacks ShutdownGame (default false)
    report.missing_names          "placeholder", "omit" or "strict" (default "placeholder")
    report.missing_name_template  Placeholder label, formatted with {id}
    plot.dpi, plot.width, plot.height
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

from quake_log_tools.base import JSONTool, logger
from quake_log_tools.log.report import MISSING_NAME_POLICIES


class Config(JSONTool):
    """
    Profile-based settings for the Quake log tools.

    Attributes:
        profiles_dir (str): Directory holding the profile JSON files
        profile (str): Active profile name
        data (dict): Defaults with the active profile layered on top
    """

    PROFILES_DIR = str(Path(__file__).parent / 'profiles')
    DEFAULT_PROFILE = "default"

    DEFAULT_SETTINGS = {
        "general": {
            "log_level": "INFO",
            "output_path": "output",
        },
        "report": {
            "flush_trailing_match": False,
            "missing_names": "placeholder",
            "missing_name_template": "<player {id}>",
        },
        "plot": {
            "dpi": 150,
            "width": 12,
            "height": 6,
        },
    }

    def __init__(self, profiles_dir: Optional[str] = None, profile: Optional[str] = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Args:
            profiles_dir: Directory of profile files. Defaults to ``profiles``
                next to this module.
            profile: Profile to activate. Defaults to "default", which is
                written out with DEFAULT_SETTINGS the first time it is missing.
            config: Tool configuration for the JSONTool base (output directory).
        """
        super().__init__(config)

        self.profiles_dir = profiles_dir or self.PROFILES_DIR
        self.profile = profile or self.DEFAULT_PROFILE
        self.data: Dict[str, Any] = {}

        Path(self.profiles_dir).mkdir(parents=True, exist_ok=True)
        self._load()

    def run(self) -> Dict[str, Any]:
        return self.data

    def _profile_path(self, profile: str) -> Path:
        return Path(self.profiles_dir) / f"{profile}.json"

    def _load(self):
        """Rebuild ``data`` from the defaults and the active profile."""
        self.data = copy.deepcopy(self.DEFAULT_SETTINGS)
        profile_path = self._profile_path(self.profile)

        if not profile_path.exists():
            if self.profile == self.DEFAULT_PROFILE:
                try:
                    self.write_json(self.data, str(profile_path))
                    logger.info(f"Created default profile at '{profile_path}'")
                except OSError as e:
                    logger.error(f"Error creating default profile: {e}")
            else:
                logger.warning(f"Profile '{self.profile}' not found. Using built-in defaults.")
            return

        overrides = self.read_json(str(profile_path))
        if not isinstance(overrides, dict):
            raise ValueError(f"Profile '{self.profile}' must hold a JSON object")

        self._layer(self.data, overrides)
        self._check_report_settings()
        logger.info(f"Loaded configuration profile '{self.profile}'")

    @classmethod
    def _layer(cls, base: Dict[str, Any], overrides: Dict[str, Any]):
        for key, value in overrides.items():
            if isinstance(base.get(key), dict) and isinstance(value, dict):
                cls._layer(base[key], value)
            else:
                base[key] = value

    def _check_report_settings(self):
        policy = self.get('report.missing_names')
        if policy not in MISSING_NAME_POLICIES:
            raise ValueError(
                f"Profile '{self.profile}': report.missing_names must be one of "
                f"{', '.join(MISSING_NAME_POLICIES)}, got {policy!r}"
            )

    def get(self, path: Optional[str] = None, default: Any = None) -> Any:
        """
        Look up a value by dot-notation path.

        Args:
            path: e.g. "report.missing_names"; None returns the whole mapping
            default: Returned when the path does not exist

        Examples:
            >>> config.get('report.flush_trailing_match')
            False
        """
        if path is None:
            return self.data

        current = self.data
        for key in path.split('.'):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def list_profiles(self) -> List[str]:
        return sorted(path.stem for path in Path(self.profiles_dir).glob("*.json"))

    def switch_profile(self, profile: str) -> bool:
        """
        Activate another profile.

        Returns:
            False, leaving the active profile unchanged, if it does not exist.
        """
        if not self._profile_path(profile).exists():
            logger.warning(f"Profile '{profile}' not found.")
            return False

        self.profile = profile
        self._load()
        return True

    def get_path(self, path_key: str, fallback: Optional[str] = None) -> str:
        """
        Resolve a configured path.

        Relative paths are taken relative to the profiles directory. An empty
        or missing value gives "".
        """
        path = self.get(path_key, fallback)
        if not path:
            return ""

        path_obj = Path(path)
        if path_obj.is_absolute():
            return str(path_obj)
        return str(Path(self.profiles_dir) / path_obj)
