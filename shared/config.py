"""Configuration management for the transcript combiner."""

import os
from pathlib import Path
from typing import List

import tomli


def _as_bool(value: object) -> bool:
    return str(value).strip().lower() in ("true", "1", "yes", "on")


class Config:
    """Centralized configuration management from app.toml with env override.

    Only the CLI reads these values, to fill in defaults for options the user
    did not pass. Pipeline components receive explicit options instead.
    """

    def __init__(self) -> None:
        # Load main configuration from file
        config_path = Path("config/app.toml")
        if config_path.exists():
            with open(config_path, "rb") as f:
                self._file_config = tomli.load(f)
        else:
            self._file_config = {}

        transcript = self._file_config.get("transcript", {})
        output = self._file_config.get("output", {})

        # Utterance filtering
        self.DEDUPE_MODE = os.environ.get(
            "DEDUPE_MODE", transcript.get("dedupe", "off")
        ).lower()
        # Skip filters come from file only, as they are lists
        self.SKIP_FILTERS: List[str] = list(transcript.get("skip_filters", []))

        # Input handling
        self.INPUT_FORMAT = os.environ.get(
            "INPUT_FORMAT", transcript.get("input_format", "auto")
        ).lower()
        self.ENCODING = os.environ.get(
            "TRANSCRIPT_ENCODING", transcript.get("encoding", "utf-8")
        )

        # Output rendering
        self.TIMESTAMPED = _as_bool(
            os.environ.get("TIMESTAMPED", str(output.get("timestamped", True)))
        )
        self.CHUNKS = int(os.environ.get("CHUNKS", output.get("chunks", "1")))
        self.SPEAKER_LABEL = os.environ.get(
            "SPEAKER_LABEL", output.get("speaker_label", "player")
        ).lower()

        self.LOG_LEVEL = os.environ.get(
            "LOG_LEVEL",
            self._file_config.get("logging", {}).get("level", "INFO"),
        ).upper()


# Global configuration instance
config = Config()
