"""Signing-key sources for requests and RSA PKCS#1 v1.5 signatures."""

import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding

from certauth.common.errors import PemParseError, SigningError
from certauth.common.utils import is_blank
from certauth.crypto.pki import CertificateBundle
from certauth.crypto.rsa_params import (
    RsaPrivateParameters,
    export_private_parameters,
    rsa_private_key,
)

logger = logging.getLogger(__name__)


class PemSigningKey:
    """Private key taken from ASCII PEM text (a key pair or a bare private key)."""
    kind = "pem"

    def __init__(self, data: bytes):
        self.data = data

    def load(self) -> RsaPrivateParameters:
        try:
            text = self.data.decode('ascii')
        except (UnicodeDecodeError, AttributeError) as e:
            raise PemParseError(f"PEM key is not ASCII text: {e}") from e

        try:
            key = serialization.load_pem_private_key(text.encode('ascii'), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise PemParseError(f"Failed to parse PEM private key: {e}") from e

        return export_private_parameters(key)


class EmbeddedSigningKey:
    """Private key carried by the subject certificate itself (self-signing)."""
    kind = "embedded"

    def __init__(self, certificate: CertificateBundle):
        self.certificate = certificate

    def load(self) -> RsaPrivateParameters:
        with rsa_private_key(self.certificate) as key:
            return export_private_parameters(key)


class ContainerSigningKey:
    """Private key inside a password-protected PKCS#12 container."""
    kind = "container"

    def __init__(self, data: bytes, password: str = ""):
        self.data = data
        self.password = password

    def load(self) -> RsaPrivateParameters:
        container = CertificateBundle.from_pkcs12(self.data, self.password)
        with rsa_private_key(container) as key:
            return export_private_parameters(key)


def resolve_signing_key(certificate: CertificateBundle, key_bytes: bytes, is_pem_key: bool):
    """
    Pick the signing-key source once, before any request is built.

    Args:
        certificate: subject certificate
        key_bytes: PEM text, PKCS#12 bytes, or None/empty
        is_pem_key: True when key_bytes hold PEM text

    Returns:
        PemSigningKey, EmbeddedSigningKey or ContainerSigningKey
    """
    if is_pem_key:
        source = PemSigningKey(key_bytes if key_bytes is not None else b"")
    elif is_blank(key_bytes):
        source = EmbeddedSigningKey(certificate)
    else:
        source = ContainerSigningKey(key_bytes)

    logger.debug(f"Signing key source: {source.kind}")
    return source


def signature_hash(hash_size_in_bits: int) -> hashes.HashAlgorithm:
    """SHA-1 below 256 bits, SHA-256 otherwise."""
    if hash_size_in_bits < 256:
        return hashes.SHA1()
    return hashes.SHA256()


def rsa_sign(params: RsaPrivateParameters, data: bytes, algorithm: hashes.HashAlgorithm) -> bytes:
    """
    Sign data with PKCS#1 v1.5 padding.

    Args:
        params: signer's private parameters
        data: bytes to sign
        algorithm: SHA1 or SHA256

    Returns:
        signature bytes

    Raises:
        SigningError if the signature cannot be computed
    """
    private_key = params.private_key()
    try:
        return private_key.sign(data, padding.PKCS1v15(), algorithm)
    except Exception as e:
        raise SigningError(f"RSA signature failed: {e}") from e
