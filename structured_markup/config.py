"""
Runtime settings for the extractors.

Settings are plain pydantic values handed to StructuredDataExtractor; nothing
here is global.  ExtractorSettings.from_env() mirrors how the command-line
runner picks configuration up from the environment (after python-dotenv has
loaded a .env file).
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

ENV_PREFIX = "STRUCTURED_MARKUP_"

# Tree builders BeautifulSoup can be asked for.  html5lib parses the way a
# browser does and is the default; lxml is much faster on large documents.
ParserName = Literal["html5lib", "lxml", "html.parser"]

_TRUTHY = {"1", "true", "yes", "on"}


class ExtractorSettings(BaseModel):
    """Configuration shared by every extraction call of one extractor."""
    parser: ParserName = "html5lib"
    log_level: str = "WARNING"
    twitter_fallback: bool = True    # Fill missing twitter:* fields from Open Graph
    log_file: Optional[str] = None   # Also write log records here

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {value}")
        return value

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ExtractorSettings":
        """
        Build settings from STRUCTURED_MARKUP_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        values = {}

        parser = env.get(f"{ENV_PREFIX}PARSER")
        if parser:
            values["parser"] = parser.strip()

        log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level

        log_file = env.get(f"{ENV_PREFIX}LOG_FILE")
        if log_file and log_file.strip():
            values["log_file"] = log_file.strip()

        fallback = env.get(f"{ENV_PREFIX}TWITTER_FALLBACK")
        if fallback is not None and fallback.strip():
            values["twitter_fallback"] = fallback.strip().lower() in _TRUTHY

        return cls(**values)
