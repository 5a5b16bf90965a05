from __future__ import annotations

import functools
import re
from enum import Enum
from pathlib import Path
from typing import Tuple

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------- Enums ----------

class BrowserName(str, Enum):
    chrome = "chrome"
    firefox = "firefox"
    safari = "safari"
    ie = "ie"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_WINDOW_SIZE_RE = re.compile(r"^\s*(\d+)\s*,\s*(\d+)\s*$")
_REGION_RE = re.compile(r"(-[A-Za-z]{2})$")


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Session configuration for recplay.

    Values load in this order of precedence:
      1) Environment variables (prefixed with RECPLAY_)
      2) .env file in the working directory
      3) Defaults below
    """

    # ---- Browser ----
    BROWSER: BrowserName = Field(default=BrowserName.chrome)
    LOCALE: str = Field(default="en", description="Browser accept-language")
    HEADLESS: bool = Field(default=False)
    WINDOW_SIZE: str = Field(default="1280,720", description="W,H used when headless")

    # ---- Timing (seconds) ----
    TIMEOUT: int = Field(default=30, ge=0, description="Implicit wait, page load, script and poll timeout")
    POLL_INTERVAL: float = Field(default=0.5, gt=0)

    # ---- Output ----
    SCREEN_DIR: Path = Field(default=Path("./screens"))
    SCRIPTS_DIR: Path = Field(default=Path("./scripts"))
    RUNS_DIR: Path = Field(default=Path("./runs"), description="Per-run playback logs and manifests")
    LOG_PREFIX: str = Field(default=" - ")
    VERBOSE: bool = Field(default=False, description="Trace outermost session calls")
    SILENT: bool = Field(default=False, description="Suppress descriptions")

    # ---- Basic access authentication (Chrome only) ----
    AUTH_USERNAME: str = Field(default="")
    AUTH_PASSWORD: str = Field(default="")

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./recplay.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="RECPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("SCREEN_DIR", "SCRIPTS_DIR", "RUNS_DIR", "LOG_FILE", mode="after")
    @classmethod
    def _absolutize(cls, v: Path) -> Path:
        return v if v.is_absolute() else Path.cwd() / v

    @field_validator("WINDOW_SIZE")
    @classmethod
    def _window_size_shape(cls, v: str) -> str:
        m = _WINDOW_SIZE_RE.match(v)
        if not m:
            raise ValueError(f"WINDOW_SIZE must look like 'W,H', got {v!r}")
        return f"{int(m.group(1))},{int(m.group(2))}"

    @field_validator("LOG_PREFIX")
    @classmethod
    def _chomp_prefix(cls, v: str) -> str:
        return v.rstrip("\r\n")

    @model_validator(mode="after")
    def _normalize_locale(self) -> "Settings":
        # Firefox wants "en-us", the other browsers "en-US".
        loc = self.LOCALE.strip().replace("_", "-", 1)
        if self.BROWSER == BrowserName.firefox:
            loc = _REGION_RE.sub(lambda m: m.group(1).lower(), loc)
        else:
            loc = _REGION_RE.sub(lambda m: m.group(1).upper(), loc)
        object.__setattr__(self, "LOCALE", loc)
        return self

    @property
    def window_dimensions(self) -> Tuple[int, int]:
        w, h = self.WINDOW_SIZE.split(",")
        return int(w), int(h)

    @property
    def screenshot_dir(self) -> Path:
        """Screenshots are grouped per locale."""
        return self.SCREEN_DIR / self.LOCALE

    @property
    def has_auth(self) -> bool:
        return bool(self.AUTH_USERNAME)


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` to reload after changing env.
    """
    return Settings()
