"""
Capella Probe - Data Models

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

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import ProbeConfig


class ServiceType(str, Enum):
    """Cluster service categories, keyed as in ping reports"""
    KV = "kv"
    MANAGER = "mgmt"
    QUERY = "query"
    SEARCH = "search"
    ANALYTICS = "analytics"
    VIEWS = "views"
    EVENTING = "eventing"


class ConnectionTuning(BaseModel):
    """Connection footprint handed to the cluster client"""
    max_http_connections: int = Field(default=1, ge=1)
    num_kv_connections: int = Field(default=1, ge=1)
    capture_traffic: List[ServiceType] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_config(cls, config: ProbeConfig) -> "ConnectionTuning":
        """Minimal pool; traffic capture on KV and management when requested"""
        capture = [ServiceType.KV, ServiceType.MANAGER] if config.capture_traffic else []
        return cls(capture_traffic=capture)


class EndpointPing(BaseModel):
    """Ping outcome for a single service endpoint"""
    id: Optional[str] = None
    local: Optional[str] = None
    remote: Optional[str] = None
    latency_us: Optional[int] = None
    state: Optional[str] = None
    namespace: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @property
    def ok(self) -> bool:
        return self.state == "ok"


class PingReport(BaseModel):
    """Per-service ping results"""
    id: Optional[str] = None
    sdk: Optional[str] = None
    version: Optional[int] = None
    services: Dict[str, List[EndpointPing]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    @property
    def all_ok(self) -> bool:
        return all(endpoint.ok for endpoints in self.services.values() for endpoint in endpoints)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)

    def __str__(self) -> str:
        return self.to_json()
