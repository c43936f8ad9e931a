"""
Capella Probe - Exception Classes

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

from pathlib import Path
from typing import Any, Dict, Optional, Union


class ProbeError(Exception):
    """Base exception for all probe errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.error_code:
            parts.append(f"Error Code: {self.error_code}")
        return " | ".join(parts)


class UsageError(ProbeError):
    """No config path was given and APP_HOME is not set"""

    def __init__(self, message: str = "USAGE: capella-probe <path-to-probe-config.json>", **kwargs) -> None:
        super().__init__(message, error_code="USAGE", **kwargs)


class ConfigFileNotFoundError(ProbeError):
    """Resolved config file does not exist"""

    def __init__(self, path: Union[str, Path], **kwargs) -> None:
        self.path = Path(path).absolute()
        super().__init__(f"Config file not found: {self.path}", error_code="CONFIG_NOT_FOUND", **kwargs)


class ConfigParseError(ProbeError):
    """Config file is not valid JSON or does not match the expected shape"""

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ) -> None:
        super().__init__(message, error_code="CONFIG_PARSE_ERROR", **kwargs)
        self.path = Path(path).absolute() if path is not None else None
        self.original_error = original_error


class ConfigurationError(ProbeError):
    """Configuration values the cluster client cannot use"""

    def __init__(self, message: str, **kwargs) -> None:
        super().__init__(message, error_code="CONFIG_ERROR", **kwargs)


class MissingResourceError(ProbeError):
    """A resource that ships inside the package is missing (broken build)"""

    def __init__(self, resource_name: str, **kwargs) -> None:
        super().__init__(f"Missing resource: {resource_name}", error_code="MISSING_RESOURCE", **kwargs)
        self.resource_name = resource_name


class TrustStoreError(ProbeError):
    """Bundled CA certificates could not be decoded"""

    def __init__(self, message: str, **kwargs) -> None:
        super().__init__(message, error_code="TRUST_STORE_ERROR", **kwargs)


class ClusterConnectionError(ProbeError):
    """Cluster could not be reached or refused the request"""

    def __init__(
        self,
        message: str = "Cluster connection failed",
        original_error: Optional[Exception] = None,
        **kwargs
    ) -> None:
        super().__init__(message, error_code="CONNECTION_ERROR", **kwargs)
        self.original_error = original_error


class AuthenticationError(ClusterConnectionError):
    """Cluster rejected the username/password"""

    def __init__(self, message: str = "Authentication failed", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.error_code = "AUTH_FAILED"


class ReadinessTimeoutError(ProbeError):
    """Cluster or bucket did not report ready within the timeout"""

    def __init__(
        self,
        message: str = "Timed out waiting for ready",
        timeout_seconds: Optional[float] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ) -> None:
        super().__init__(message, error_code="TIMEOUT", **kwargs)
        self.timeout_seconds = timeout_seconds
        self.original_error = original_error


def map_couchbase_error(error: Exception, context: str, timeout_seconds: Optional[float] = None) -> ProbeError:
    """Map Couchbase SDK exceptions to probe exceptions"""
    from couchbase.exceptions import (
        AmbiguousTimeoutException,
        AuthenticationException,
        UnAmbiguousTimeoutException,
    )

    if isinstance(error, (UnAmbiguousTimeoutException, AmbiguousTimeoutException)):
        return ReadinessTimeoutError(
            f"{context}: timed out after {timeout_seconds}s" if timeout_seconds else f"{context}: timed out",
            timeout_seconds=timeout_seconds,
            original_error=error,
        )
    elif isinstance(error, AuthenticationException):
        return AuthenticationError(f"{context}: authentication failed", original_error=error)
    else:
        return ClusterConnectionError(f"{context}: {error}", original_error=error)
