"""
Capella Probe - Cluster Client Interface

The probe talks to the cluster only through these protocols. The Couchbase
SDK adapter lives in couchbase_cluster; tests supply fakes.

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

from datetime import timedelta
from typing import Any, Protocol, Sequence

from cryptography import x509

from .models import ConnectionTuning


class BucketHandle(Protocol):
    """Opened bucket"""

    def wait_until_ready(self, timeout: timedelta) -> None:
        """Block until the bucket is ready; raise ReadinessTimeoutError otherwise"""
        ...


class ClusterHandle(Protocol):
    """Live cluster connection, owned by exactly one caller"""

    def wait_until_ready(self, timeout: timedelta) -> None:
        """Block until the cluster is ready; raise ReadinessTimeoutError otherwise"""
        ...

    def bucket(self, name: str) -> BucketHandle:
        ...

    def ping(self) -> Any:
        """Ping all exposed services; the result's str() is the printable report"""
        ...

    def disconnect(self) -> None:
        ...


class ClusterConnector(Protocol):
    """Opens cluster connections"""

    def connect(
        self,
        connection_string: str,
        username: str,
        password: str,
        trust_anchors: Sequence[x509.Certificate],
        tuning: ConnectionTuning,
    ) -> ClusterHandle:
        ...
