"""Common utilities, configuration and the error taxonomy."""

from .errors import (
    CertificateAuthorityError,
    KeyExtractionError,
    ContainerLoadError,
    ContainerSaveError,
    PemParseError,
    SigningError,
    ReimportError,
    SubjectNameError,
)
from .utils import (
    sha256_hex,
    cert_fingerprint,
    int_to_bytes,
    is_blank,
)
from .config import configure_logging, pkcs12_encryption

__all__ = [
    "CertificateAuthorityError",
    "KeyExtractionError",
    "ContainerLoadError",
    "ContainerSaveError",
    "PemParseError",
    "SigningError",
    "ReimportError",
    "SubjectNameError",
    "sha256_hex",
    "cert_fingerprint",
    "int_to_bytes",
    "is_blank",
    "configure_logging",
    "pkcs12_encryption",
]
