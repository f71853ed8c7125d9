"""Helper signatures: sha256_hex, cert_fingerprint, int_to_bytes, is_blank."""

import hashlib
from typing import Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization


def sha256_hex(data: Union[bytes, str]) -> str:
    """Compute SHA-256 hash and return as hex string."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).hexdigest()


def cert_fingerprint(cert: x509.Certificate) -> str:
    """Compute SHA-256 fingerprint of a certificate's DER encoding."""
    return sha256_hex(cert.public_bytes(serialization.Encoding.DER))


def int_to_bytes(value: int) -> bytes:
    """Big-endian magnitude of a non-negative integer, no sign byte."""
    if value < 0:
        raise ValueError("Negative integers have no magnitude encoding")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), 'big')


def is_blank(data) -> bool:
    """True when key bytes were not actually supplied."""
    return data is None or len(data) == 0
