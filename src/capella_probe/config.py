"""
Capella Probe - Configuration

Copyright 2022 Couchbase, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, TextIO, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigFileNotFoundError, ConfigParseError, UsageError


logger = logging.getLogger(__name__)

APP_HOME_ENV = "APP_HOME"
DEFAULT_CONFIG_FILE = Path("config") / "probe-config.json"


class LogLevel(str, Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ProbeConfig(BaseModel):
    """Connection credentials read from probe-config.json"""

    connection_string: str = Field(default="", alias="connectionString", description="Cluster address")
    username: str = ""
    password: str = Field(default="", repr=False)
    bucket: str = Field(default="", description="Bucket whose readiness is checked")
    capture_traffic: bool = Field(default=False, alias="captureTraffic")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class RuntimeSettings(BaseModel):
    """Process settings taken from the environment"""

    log_level: LogLevel = LogLevel.WARNING
    enable_debug_logging: bool = False
    app_home: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "RuntimeSettings":
        """Create settings from environment variables"""
        env = os.environ if environ is None else environ
        settings = {}

        if log_level := env.get("CAPELLA_PROBE_LOG_LEVEL"):
            if log_level.upper() in LogLevel.__members__:
                settings["log_level"] = log_level.upper()
            else:
                logger.warning(f"Ignoring invalid CAPELLA_PROBE_LOG_LEVEL={log_level!r}, using WARNING")
        if debug := env.get("CAPELLA_PROBE_DEBUG"):
            settings["enable_debug_logging"] = debug.lower() in ("true", "1", "yes")
        if APP_HOME_ENV in env:
            settings["app_home"] = env[APP_HOME_ENV]

        settings.update(overrides)
        return cls(**settings)

    @property
    def effective_level(self) -> int:
        if self.enable_debug_logging:
            return logging.DEBUG
        return getattr(logging, LogLevel(self.log_level).value)


def resolve_config_path(
    path: Optional[Union[str, Path]] = None,
    app_home: Optional[str] = None,
) -> Path:
    """Resolve the config file location.

    Precedence:
    1. Explicit path
    2. ${APP_HOME}/config/probe-config.json
    Otherwise raises UsageError.
    """
    if path is not None:
        return Path(path)

    if app_home is None:
        app_home = os.environ.get(APP_HOME_ENV)
    if app_home is None:
        raise UsageError()

    # An empty APP_HOME still yields /config/probe-config.json
    return Path(f"{app_home}/{DEFAULT_CONFIG_FILE.as_posix()}")


def load_config(
    path: Optional[Union[str, Path]] = None,
    app_home: Optional[str] = None,
    out: Optional[TextIO] = None,
) -> ProbeConfig:
    """Resolve, announce, read and parse the probe config file"""
    out = out or sys.stdout
    config_file = resolve_config_path(path, app_home).absolute()

    print(f"Reading probe config from {config_file}", file=out)

    try:
        content = config_file.read_bytes()
    except (FileNotFoundError, IsADirectoryError, PermissionError):
        raise ConfigFileNotFoundError(config_file) from None

    try:
        config = ProbeConfig.model_validate_json(content)
    except ValidationError as e:
        raise ConfigParseError(
            f"Invalid probe config {config_file}: {e}",
            path=config_file,
            original_error=e,
        ) from e

    logger.debug(f"Loaded probe config for {config.connection_string} bucket={config.bucket}")
    return config
