"""
Capella Probe - connectivity health check for Couchbase Capella clusters

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

from .config import ProbeConfig, RuntimeSettings, LogLevel, load_config, resolve_config_path
from .models import ServiceType, ConnectionTuning, PingReport, EndpointPing
from .trust import load_trust_anchors
from .runner import ProbeRunner, READY_TIMEOUT
from .cli import main
from .exceptions import (
    ProbeError,
    UsageError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigurationError,
    MissingResourceError,
    TrustStoreError,
    ClusterConnectionError,
    AuthenticationError,
    ReadinessTimeoutError,
)

__version__ = "1.0.0"

__all__ = [
    # Entry points
    "main",
    "ProbeRunner",
    "READY_TIMEOUT",

    # Configuration
    "ProbeConfig",
    "RuntimeSettings",
    "LogLevel",
    "load_config",
    "resolve_config_path",
    "load_trust_anchors",

    # Models
    "ServiceType",
    "ConnectionTuning",
    "PingReport",
    "EndpointPing",

    # Exceptions
    "ProbeError",
    "UsageError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigurationError",
    "MissingResourceError",
    "TrustStoreError",
    "ClusterConnectionError",
    "AuthenticationError",
    "ReadinessTimeoutError",
]
