"""
Capella Probe Test Configuration
Shared fixtures and a fake cluster client for all test modules
"""

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from capella_probe.models import ConnectionTuning, EndpointPing, PingReport


# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

SAMPLE_CONFIG = {
    "connectionString": "couchbases://host",
    "username": "u",
    "password": "p",
    "bucket": "b",
    "captureTraffic": True,
}

PING_REPORT = PingReport(
    id="probe-test",
    sdk="fake-sdk/1.0",
    version=2,
    services={
        "kv": [EndpointPing(id="0x1", remote="host:11207", latency_us=1200, state="ok", namespace="b")],
        "mgmt": [EndpointPing(id="0x2", remote="host:18091", latency_us=3400, state="ok")],
    },
)


class FakeBucket:
    """Bucket double that records readiness waits"""

    def __init__(self, cluster: "FakeCluster", name: str):
        self.cluster = cluster
        self.name = name

    def wait_until_ready(self, timeout: timedelta) -> None:
        self.cluster.calls.append(("bucket.wait_until_ready", self.name, timeout))
        if self.cluster.bucket_ready_error is not None:
            raise self.cluster.bucket_ready_error


class FakeCluster:
    """Cluster double with configurable readiness failures"""

    def __init__(
        self,
        report: Any = PING_REPORT,
        cluster_ready_error: Optional[Exception] = None,
        bucket_ready_error: Optional[Exception] = None,
    ):
        self.report = report
        self.cluster_ready_error = cluster_ready_error
        self.bucket_ready_error = bucket_ready_error
        self.calls: List[Tuple] = []
        self.disconnect_count = 0
        self.ping_count = 0

    def wait_until_ready(self, timeout: timedelta) -> None:
        self.calls.append(("wait_until_ready", timeout))
        if self.cluster_ready_error is not None:
            raise self.cluster_ready_error

    def bucket(self, name: str) -> FakeBucket:
        self.calls.append(("bucket", name))
        return FakeBucket(self, name)

    def ping(self) -> Any:
        self.calls.append(("ping",))
        self.ping_count += 1
        return self.report

    def disconnect(self) -> None:
        self.calls.append(("disconnect",))
        self.disconnect_count += 1


class FakeConnector:
    """Connector double that hands out a single FakeCluster"""

    def __init__(self, cluster: Optional[FakeCluster] = None):
        self.cluster = cluster or FakeCluster()
        self.connect_calls: List[Dict[str, Any]] = []

    def connect(self, connection_string, username, password, trust_anchors, tuning: ConnectionTuning):
        self.connect_calls.append({
            "connection_string": connection_string,
            "username": username,
            "password": password,
            "trust_anchors": list(trust_anchors),
            "tuning": tuning,
        })
        return self.cluster


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    return dict(SAMPLE_CONFIG)


@pytest.fixture
def config_file(tmp_path: Path, sample_config) -> Path:
    """probe-config.json written to a temp directory"""
    path = tmp_path / "probe-config.json"
    path.write_text(json.dumps(sample_config))
    return path


@pytest.fixture
def app_home(tmp_path: Path, sample_config, monkeypatch) -> Path:
    """APP_HOME layout with config/probe-config.json"""
    home = tmp_path / "app"
    (home / "config").mkdir(parents=True)
    (home / "config" / "probe-config.json").write_text(json.dumps(sample_config))
    monkeypatch.setenv("APP_HOME", str(home))
    return home


@pytest.fixture
def no_app_home(monkeypatch):
    monkeypatch.delenv("APP_HOME", raising=False)


@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def fake_connector(fake_cluster) -> FakeConnector:
    return FakeConnector(fake_cluster)
