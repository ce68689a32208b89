import json
import os
from pathlib import Path
from string import Template
from typing import Any, List, Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from songdedup.models.config import EngineConfig
from songdedup.models.song import SongRecord
from songdedup.utils.exceptions import RecordLoadError

logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Configuration validation failed"""

    pass


class ConfigManager:
    """Loads engine configuration and record files for command-line scans"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self.env_loaded = False
        self._config: Optional[EngineConfig] = None

    def load_config(self) -> EngineConfig:
        """Load and validate configuration.

        Without a config path the defaults are returned.
        """
        if self._config:
            return self._config

        # 1. Load environment
        if not self.env_loaded:  # pragma: no cover
            load_dotenv()
            self.env_loaded = True

        if self.config_path is None:
            self._config = EngineConfig()
            return self._config

        # 2. Check file existence
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        # 3. Read YAML
        try:
            raw_content = self.config_path.read_text()
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}")

        # 4. Substitute env vars
        try:
            template = Template(raw_content)
            substituted_content = template.safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted_content) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Failed to parse YAML: {e}")

        if not isinstance(config_data, dict):
            raise ConfigValidationError("Configuration must be a mapping")

        # 5. Validate with Pydantic
        try:
            self._config = EngineConfig(**config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}")

        logger.info("config_loaded", path=str(self.config_path))
        return self._config

    @staticmethod
    def load_records(records_path: Path) -> List[SongRecord]:
        """Load songs from a JSON export.

        Accepts either a list of song payloads or an object holding them
        under "songs".

        Raises:
            FileNotFoundError: If the file does not exist
            RecordLoadError: If the file is not a valid song list
        """
        records_path = Path(records_path)
        if not records_path.exists():
            raise FileNotFoundError(f"Records file not found: {records_path}")

        try:
            payload = json.loads(records_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RecordLoadError(f"Failed to read records file: {e}")

        records = ConfigManager.records_from_payload(payload)
        logger.info("records_loaded", path=str(records_path), count=len(records))
        return records

    @staticmethod
    def records_from_payload(payload: Any) -> List[SongRecord]:
        """Build records from decoded song payloads.

        Raises:
            RecordLoadError: If the payload is not a valid song list
        """
        if isinstance(payload, dict):
            payload = payload.get("songs")
        if not isinstance(payload, list):
            raise RecordLoadError(
                "Records file must hold a list of songs or an object with a 'songs' list"
            )

        records = []
        for position, song in enumerate(payload):
            if not isinstance(song, dict):
                raise RecordLoadError(f"Song #{position} is not an object")
            try:
                records.append(SongRecord.from_song_dict(song))
            except ValidationError as e:
                raise RecordLoadError(f"Song #{position} is invalid: {e}")

        return records
