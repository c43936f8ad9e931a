"""
Capella Probe - Couchbase SDK Adapter

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
from contextlib import ExitStack
from datetime import timedelta
from typing import Sequence

import couchbase
from couchbase.auth import PasswordAuthenticator
from couchbase.cluster import Cluster
from couchbase.diagnostics import ClusterState
from couchbase.diagnostics import ServiceType as SdkServiceType
from couchbase.exceptions import CouchbaseException
from couchbase.options import ClusterOptions, WaitUntilReadyOptions
from cryptography import x509

from .exceptions import ConfigurationError, map_couchbase_error
from .models import ConnectionTuning, PingReport
from .trust import ca_bundle_path


logger = logging.getLogger(__name__)

TLS_SCHEME = "couchbases"
PLAIN_SCHEME = "couchbase"
TRAFFIC_LOGGER = "capella_probe.traffic"
TRAFFIC_CAPTURE_FILE = "capella-probe-traffic.log"

_traffic_logging_configured = False


def build_connection_string(connection_string: str, tuning: ConnectionTuning) -> str:
    """Force TLS and append pool tuning parameters"""
    if not connection_string:
        raise ConfigurationError("Connection string cannot be empty")

    if "://" not in connection_string:
        connection_string = f"{TLS_SCHEME}://{connection_string}"

    scheme, rest = connection_string.split("://", 1)
    if scheme == PLAIN_SCHEME:
        logger.warning("Upgrading couchbase:// connection string to couchbases://, TLS is mandatory")
    elif scheme != TLS_SCHEME:
        raise ConfigurationError(f"Unsupported connection string scheme: {scheme}")

    # The SDK core opens one KV connection per node, so num_kv_connections has no parameter
    separator = "&" if "?" in rest else "?"
    return f"{TLS_SCHEME}://{rest}{separator}max_http_connections={tuning.max_http_connections}"


def enable_traffic_capture(tuning: ConnectionTuning) -> None:
    """Save raw protocol traffic to a file and route SDK core logging at DEBUG"""
    global _traffic_logging_configured
    if not tuning.capture_traffic or _traffic_logging_configured:
        return

    traffic_logger = logging.getLogger(TRAFFIC_LOGGER)
    traffic_logger.setLevel(logging.DEBUG)
    couchbase.configure_logging(traffic_logger.name, level=logging.DEBUG)
    capture_file = os.path.abspath(TRAFFIC_CAPTURE_FILE)
    couchbase.enable_protocol_logger_to_save_network_traffic_to_file(capture_file)
    _traffic_logging_configured = True

    services = ", ".join(service.value for service in tuning.capture_traffic)
    logger.info(f"Capturing traffic for services: {services} to {capture_file}")


class CouchbaseBucket:
    """Bucket opened through the Couchbase SDK"""

    def __init__(self, cluster: Cluster, name: str) -> None:
        self._cluster = cluster
        self.name = name
        try:
            self._bucket = cluster.bucket(name)
        except CouchbaseException as e:
            raise map_couchbase_error(e, f"Opening bucket '{name}'") from e

    def wait_until_ready(self, timeout: timedelta) -> None:
        # KV endpoints only come online for an opened bucket
        options = WaitUntilReadyOptions(
            desired_state=ClusterState.Online,
            service_types=[SdkServiceType.KeyValue],
        )
        try:
            self._cluster.wait_until_ready(timeout, options)
        except CouchbaseException as e:
            raise map_couchbase_error(
                e, f"Waiting for bucket '{self.name}'", timeout_seconds=timeout.total_seconds()
            ) from e


class CouchbaseClusterHandle:
    """Cluster connection that owns its temporary trust store"""

    def __init__(self, cluster: Cluster, resources: ExitStack) -> None:
        self._cluster = cluster
        self._resources = resources

    def wait_until_ready(self, timeout: timedelta) -> None:
        try:
            self._cluster.wait_until_ready(timeout)
        except CouchbaseException as e:
            raise map_couchbase_error(
                e, "Waiting for cluster", timeout_seconds=timeout.total_seconds()
            ) from e

    def bucket(self, name: str) -> CouchbaseBucket:
        return CouchbaseBucket(self._cluster, name)

    def ping(self) -> PingReport:
        try:
            result = self._cluster.ping()
        except CouchbaseException as e:
            raise map_couchbase_error(e, "Pinging cluster") from e
        return PingReport.model_validate_json(result.as_json())

    def disconnect(self) -> None:
        try:
            self._cluster.close()
        finally:
            self._resources.close()


class CouchbaseConnector:
    """Connects using the Couchbase Python SDK"""

    def connect(
        self,
        connection_string: str,
        username: str,
        password: str,
        trust_anchors: Sequence[x509.Certificate],
        tuning: ConnectionTuning,
    ) -> CouchbaseClusterHandle:
        connstr = build_connection_string(connection_string, tuning)
        enable_traffic_capture(tuning)

        with ExitStack() as resources:
            cert_path = resources.enter_context(ca_bundle_path(trust_anchors))
            # cert_path replaces the system trust store
            authenticator = PasswordAuthenticator(username, password, cert_path=str(cert_path))

            logger.debug(f"Opening cluster connection {connstr}")
            try:
                cluster = Cluster(connstr, ClusterOptions(authenticator))
            except CouchbaseException as e:
                raise map_couchbase_error(e, f"Connecting to {connection_string}") from e

            return CouchbaseClusterHandle(cluster, resources.pop_all())
