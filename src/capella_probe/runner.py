"""
Capella Probe - Probe Runner

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
import sys
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Iterator, Optional, Sequence, TextIO

from cryptography import x509

from .cluster import ClusterConnector, ClusterHandle
from .config import ProbeConfig
from .models import ConnectionTuning


logger = logging.getLogger(__name__)

READY_TIMEOUT = timedelta(minutes=1)


class ProbeRunner:
    """Connect, wait for cluster and bucket, ping, disconnect.

    Every step blocks until it completes; any failure propagates and aborts
    the run. The connection is released exactly once on every exit path.
    """

    def __init__(
        self,
        connector: ClusterConnector,
        out: Optional[TextIO] = None,
        ready_timeout: timedelta = READY_TIMEOUT,
    ) -> None:
        self.connector = connector
        self.out = out or sys.stdout
        self.ready_timeout = ready_timeout

    def _say(self, message: str) -> None:
        print(f"*** {message}", file=self.out)

    @contextmanager
    def connected(
        self,
        config: ProbeConfig,
        trust_anchors: Sequence[x509.Certificate],
    ) -> Iterator[ClusterHandle]:
        """Open the cluster connection and guarantee a single disconnect"""
        self._say(f"Connecting to {config.connection_string} as user {config.username}")
        tuning = ConnectionTuning.for_config(config)
        cluster = self.connector.connect(
            config.connection_string,
            config.username,
            config.password,
            trust_anchors,
            tuning,
        )
        try:
            yield cluster
        finally:
            self._say("Disconnecting from cluster...")
            cluster.disconnect()

    def run(self, config: ProbeConfig, trust_anchors: Sequence[x509.Certificate]) -> Any:
        """Run the probe and return the ping report"""
        with self.connected(config, trust_anchors) as cluster:
            self._say("Waiting for cluster ready...")
            cluster.wait_until_ready(self.ready_timeout)

            self._say(f"Waiting for bucket '{config.bucket}' ready...")
            bucket = cluster.bucket(config.bucket)
            bucket.wait_until_ready(self.ready_timeout)

            self._say("Pinging cluster...")
            report = cluster.ping()
            print(report, file=self.out)

        self._say("Done.")
        logger.info(f"Probe of {config.connection_string} completed")
        return report
