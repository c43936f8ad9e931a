"""
Capella Probe - Command Line Entry Point

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

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .cluster import ClusterConnector
from .config import RuntimeSettings, load_config
from .exceptions import ConfigFileNotFoundError, UsageError
from .runner import ProbeRunner
from .trust import load_trust_anchors


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capella-probe",
        description="Check that a Capella cluster and bucket are reachable and ready",
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=None,
        help="path to probe-config.json (default: $APP_HOME/config/probe-config.json)",
    )
    return parser


def setup_logging(settings: RuntimeSettings) -> None:
    """Configure root logging to stderr"""
    logging.basicConfig(level=settings.effective_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger("capella_probe").setLevel(settings.effective_level)


def main(
    argv: Optional[List[str]] = None,
    connector: Optional[ClusterConnector] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Run the probe; returns the process exit status.

    Usage and missing-config errors return 1. Anything else (parse errors,
    connection failures, readiness timeouts) propagates to the caller.
    """
    out = out or sys.stdout
    err = err or sys.stderr

    args = build_parser().parse_args(argv)
    settings = RuntimeSettings.from_env()
    setup_logging(settings)

    try:
        config = load_config(args.config, app_home=settings.app_home, out=out)
    except UsageError as e:
        print(e.message, file=err)
        return EXIT_USAGE
    except ConfigFileNotFoundError as e:
        print(e.message, file=err)
        return EXIT_USAGE

    trust_anchors = load_trust_anchors()

    if connector is None:
        from .couchbase_cluster import CouchbaseConnector
        connector = CouchbaseConnector()

    ProbeRunner(connector, out=out).run(config, trust_anchors)
    return EXIT_OK


def run() -> None:
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
