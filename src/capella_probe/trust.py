"""
Capella Probe - TLS Trust Anchors

The probe trusts only the CA bundle shipped inside the package. A missing or
undecodable bundle is a broken build, so the errors raised here are never
handled.

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
import tempfile
from contextlib import contextmanager
from importlib import resources
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .exceptions import MissingResourceError, TrustStoreError


logger = logging.getLogger(__name__)

RESOURCE_PACKAGE = "capella_probe.resources"
CA_BUNDLE_RESOURCE = "capella-ca.pem"


def read_ca_bundle(resource_name: str = CA_BUNDLE_RESOURCE) -> bytes:
    """Read the raw PEM bundle from package resources"""
    resource = resources.files(RESOURCE_PACKAGE).joinpath(resource_name)
    try:
        return resource.read_bytes()
    except FileNotFoundError:
        raise MissingResourceError(resource_name) from None


def decode_certificates(pem_data: bytes) -> List[x509.Certificate]:
    """Decode every certificate in a PEM bundle"""
    try:
        certificates = x509.load_pem_x509_certificates(pem_data)
    except ValueError as e:
        raise TrustStoreError(f"Could not decode CA bundle: {e}") from e

    if not certificates:
        raise TrustStoreError("CA bundle contains no certificates")
    return certificates


def load_trust_anchors(resource_name: str = CA_BUNDLE_RESOURCE) -> List[x509.Certificate]:
    """Bundled certificate authorities used to verify the cluster"""
    certificates = decode_certificates(read_ca_bundle(resource_name))
    for cert in certificates:
        logger.debug(f"Trust anchor: {cert.subject.rfc4514_string()}")
    return certificates


def encode_certificates(certificates: Sequence[x509.Certificate]) -> bytes:
    return b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in certificates)


@contextmanager
def ca_bundle_path(certificates: Optional[Sequence[x509.Certificate]] = None) -> Iterator[Path]:
    """Write trust anchors to a temporary PEM file for clients that take a path"""
    if certificates is None:
        certificates = load_trust_anchors()

    with tempfile.TemporaryDirectory(prefix="capella-probe-") as tmp:
        path = Path(tmp) / CA_BUNDLE_RESOURCE
        path.write_bytes(encode_certificates(certificates))
        yield path
