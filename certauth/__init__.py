"""certauth: combine certificates with private keys and build signing requests."""

from .authority import combine, combine_to_pkcs12, create_request
from .crypto.pki import CertificateBundle
from .common.errors import (
    CertificateAuthorityError,
    KeyExtractionError,
    ContainerLoadError,
    ContainerSaveError,
    PemParseError,
    SigningError,
    ReimportError,
    SubjectNameError,
)

__all__ = [
    "combine",
    "combine_to_pkcs12",
    "create_request",
    "CertificateBundle",
    "CertificateAuthorityError",
    "KeyExtractionError",
    "ContainerLoadError",
    "ContainerSaveError",
    "PemParseError",
    "SigningError",
    "ReimportError",
    "SubjectNameError",
]
