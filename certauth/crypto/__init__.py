"""Cryptographic building blocks for certauth."""

from .rsa_params import (
    RsaKeyParameters,
    RsaPublicParameters,
    RsaPrivateParameters,
    export_public_parameters,
    export_private_parameters,
    export_parameters,
    rsa_private_key,
    rsa_public_key,
)
from .random_source import RandomSource
from .pki import (
    CertificateBundle,
    format_name,
    normalize_subject,
    parse_subject,
    find_leaf,
)
from .sign import (
    PemSigningKey,
    EmbeddedSigningKey,
    ContainerSigningKey,
    resolve_signing_key,
    signature_hash,
    rsa_sign,
)
from .csr import build_request

__all__ = [
    "RsaKeyParameters",
    "RsaPublicParameters",
    "RsaPrivateParameters",
    "export_public_parameters",
    "export_private_parameters",
    "export_parameters",
    "rsa_private_key",
    "rsa_public_key",
    "RandomSource",
    "CertificateBundle",
    "format_name",
    "normalize_subject",
    "parse_subject",
    "find_leaf",
    "PemSigningKey",
    "EmbeddedSigningKey",
    "ContainerSigningKey",
    "resolve_signing_key",
    "signature_hash",
    "rsa_sign",
    "build_request",
]
