"""
Certificate authority helpers.

Handles:
1. combine: attach the private key of one certificate to another certificate
2. create_request: build a signed PKCS#10 request from a certificate's subject
   and public key
"""

import logging
from typing import Tuple

from certauth.common.errors import ContainerLoadError, ReimportError
from certauth.crypto.csr import build_request
from certauth.crypto.pki import CertificateBundle, normalize_subject, parse_subject
from certauth.crypto.random_source import RandomSource
from certauth.crypto.rsa_params import (
    export_private_parameters,
    export_public_parameters,
    rsa_private_key,
    rsa_public_key,
)
from certauth.crypto.sign import resolve_signing_key, signature_hash
from certauth.storage.pkcs12_store import Pkcs12Store

logger = logging.getLogger(__name__)


def combine_to_pkcs12(
    public_certificate: CertificateBundle,
    private_key_certificate: CertificateBundle
) -> Tuple[bytes, str]:
    """
    Package the public certificate with another certificate's private key.

    Args:
        public_certificate: certificate (and chain) to keep
        private_key_certificate: certificate holding the private key to attach

    Returns:
        (pkcs12_bytes, passphrase) tuple

    Raises:
        KeyExtractionError if the private key is missing or not exportable
        ContainerLoadError if the exported certificate cannot be loaded
        ContainerSaveError if the container cannot be re-serialized
    """
    with RandomSource() as random:
        with rsa_private_key(private_key_certificate) as key:
            private_params = export_private_parameters(key)

        store = Pkcs12Store()
        store.load(public_certificate.export_pkcs12(include_private_key=False))

        leaf = store.leaf_certificate()
        if leaf is None:
            raise ContainerLoadError("Exported certificate container is empty")
        chain = [leaf] + [cert for cert in store.certificate_entries if cert is not leaf]

        passphrase = random.token_uuid()
        store.set_key_entry(public_certificate.subject, private_params.private_key(), chain)
        return store.save(passphrase), passphrase


def combine(
    public_certificate: CertificateBundle,
    private_key_certificate: CertificateBundle
) -> CertificateBundle:
    """
    Combine the public certificate of one bundle with the private key of another.

    Returns:
        CertificateBundle carrying public_certificate's certificate and chain
        and private_key_certificate's private key

    Raises:
        KeyExtractionError, ContainerLoadError, ContainerSaveError, ReimportError
    """
    logger.info(
        f"Combining certificate {public_certificate.fingerprint[:16]} with key of "
        f"{private_key_certificate.fingerprint[:16]}"
    )
    data, passphrase = combine_to_pkcs12(public_certificate, private_key_certificate)

    try:
        combined = CertificateBundle.from_pkcs12(data, passphrase)
    except ContainerLoadError as e:
        raise ReimportError(f"Combined PKCS#12 container could not be reloaded: {e}") from e
    if not combined.has_private_key:
        raise ReimportError("Combined PKCS#12 container lost its private key")

    logger.info(f"Combined certificate ready: {combined.subject}")
    return combined


def create_request(
    certificate: CertificateBundle,
    signing_key_bytes: bytes,
    is_pem_key: bool,
    hash_size_in_bits: int
) -> bytes:
    """
    Create a PKCS#10 certificate signing request.

    Args:
        certificate: supplies the subject name and the public key
        signing_key_bytes: PEM text (is_pem_key=True), PKCS#12 bytes with an
            empty password, or None/empty to use the certificate's own key
        is_pem_key: True if signing_key_bytes is PEM text
        hash_size_in_bits: below 256 selects SHA-1, otherwise SHA-256

    Returns:
        DER-encoded certificate signing request

    Raises:
        PemParseError if the PEM text cannot be parsed
        KeyExtractionError if the required private key is missing or unusable
        ContainerLoadError if the key container cannot be read
        SubjectNameError if the subject cannot be parsed
        SigningError if the signature cannot be computed
    """
    source = resolve_signing_key(certificate, signing_key_bytes, is_pem_key)
    signer = source.load()

    with rsa_public_key(certificate) as key:
        public_params = export_public_parameters(key)

    algorithm = signature_hash(hash_size_in_bits)
    subject = parse_subject(normalize_subject(certificate.subject))

    logger.info(
        f"Creating {algorithm.name.upper()}withRSA request for {certificate.subject} "
        f"(signing key: {source.kind})"
    )
    return build_request(subject, public_params, signer, algorithm)
