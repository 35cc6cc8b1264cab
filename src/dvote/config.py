"""Runtime settings, read from the environment and an optional .env file.

Process limits (question counts, cost ranges, flag sets) are protocol
constants enforced by the contracts and are not settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "production"
DEFAULT_CENSUS_URI = "ipfs://"

_LOG_FORMATS = ("production", "development")


@dataclass(frozen=True)
class Settings:
    """SDK settings.

    log_level: standard logging level name.
    log_format: "production" (JSON lines) or "development" (console).
    default_census_uri: sent in the census URI slot when none is set.
    """
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    default_census_uri: str = DEFAULT_CENSUS_URI

    def __post_init__(self) -> None:
        if self.log_format not in _LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {', '.join(_LOG_FORMATS)}, "
                f"got {self.log_format!r}"
            )
        if not self.default_census_uri:
            raise ValueError("default_census_uri must not be empty")

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> Settings:
        """Load settings from DVOTE_* environment variables.

        If env_file is given (or a .env exists in the working directory),
        it is loaded first without overriding variables already set.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()
        return cls(
            log_level=os.getenv("DVOTE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            log_format=os.getenv("DVOTE_LOG_FORMAT", DEFAULT_LOG_FORMAT).lower(),
            default_census_uri=os.getenv("DVOTE_DEFAULT_CENSUS_URI", DEFAULT_CENSUS_URI),
        )
