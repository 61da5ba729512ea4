"""Configuration manager: load, save and validate the YAML configuration.

Uses ruamel.yaml for YAML serialization with comments.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig

logger = logging.getLogger(__name__)

yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML COMMENTS ───

_YAML_HEADER = f"""\
# ============================================
# Room booking scheduler - configuration
# Created: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "rooms": (
        "Rooms",
        "Fixed set of bookable rooms. Ids are referenced by stored bookings,\n"
        "renaming an id orphans its bookings.",
    ),
    "grid": (
        "Weekly grid",
        "Rows from start_hour:00 to end_hour:00 (inclusive) every slot_minutes.",
    ),
    "storage": (
        "Storage",
        "on_corrupt_state: seed = fall back to the example bookings, raise = abort.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "booking_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is not None:
            self.DEFAULT_CONFIG = Path(path)
            self.CONFIG_DIR = self.DEFAULT_CONFIG.parent

    def first_run_check(self) -> bool:
        """Returns True if no config file exists yet."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Loading ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Loads the config from YAML. Validated by Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Config file not found: {target}\n"
                f"Run 'python main.py config init' to create one."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return AppConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Invalid config file: {target}\n"
                f"Pydantic error: {e}"
            ) from e

    def load_or_default(self) -> AppConfig:
        """Loads the config file, or the built-in defaults on first run."""
        if self.first_run_check():
            logger.debug(f"No config at {self.DEFAULT_CONFIG}, using defaults")
            return default_app_config()
        return self.load()

    # ─── Saving ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> Path:
        """Saves the config as commented YAML and returns the path."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        logger.info(f"Config saved: {target}")
        return target

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm
