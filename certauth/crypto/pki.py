"""Certificate bundles and Windows-style distinguished-name strings."""

import re
import logging
from typing import List, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from certauth.common.config import pkcs12_encryption
from certauth.common.errors import ContainerLoadError, SubjectNameError
from certauth.common.utils import cert_fingerprint

logger = logging.getLogger(__name__)

# Rendering overrides on top of cryptography's RFC 4514 names; S and E follow
# the Windows certificate store convention.
_FORMAT_KEYS = {
    NameOID.STATE_OR_PROVINCE_NAME: "S",
    NameOID.EMAIL_ADDRESS: "E",
    NameOID.SERIAL_NUMBER: "SERIALNUMBER",
    NameOID.TITLE: "T",
    NameOID.GIVEN_NAME: "G",
    NameOID.SURNAME: "SN",
}

# Parsing overrides; S is absent, callers rename it to ST first.
_PARSE_KEYS = {
    "E": NameOID.EMAIL_ADDRESS,
    "SERIALNUMBER": NameOID.SERIAL_NUMBER,
    "T": NameOID.TITLE,
    "G": NameOID.GIVEN_NAME,
    "SN": NameOID.SURNAME,
}

# Escape pairs are matched first so separators escaped inside values never
# start a match.
_STATE_KEY = re.compile(r'\\.|(^|[,+]\s*)S=', re.DOTALL)
_SEPARATOR_SPACE = re.compile(r'\\.|([,+])\s+', re.DOTALL)


def _sub_unescaped(pattern: re.Pattern, replacement: str, text: str) -> str:
    def replace(match):
        if match.group(1) is None:
            return match.group(0)
        return match.group(1) + replacement
    return pattern.sub(replace, text)


def format_name(name: x509.Name) -> str:
    """
    Render a name most-specific RDN first, e.g. "CN=Test, S=Washington, C=US".

    Each RDN is rendered by cryptography's RFC 4514 writer, so special
    characters in values are backslash-escaped; RDNs are joined with ", ".
    """
    return ", ".join(rdn.rfc4514_string(_FORMAT_KEYS) for rdn in reversed(name.rdns))


def normalize_subject(subject: str) -> str:
    """Rename the S= (state/province) key to ST=; values are never touched."""
    return _sub_unescaped(_STATE_KEY, "ST=", subject)


def parse_subject(subject: str) -> x509.Name:
    """
    Parse a most-specific-first DN string into an x509.Name.

    Accepts format_name() output (after normalize_subject) as well as plain
    RFC 4514 strings. The string order is reversed so the result's DER order
    starts with the least specific RDN (C, ST, ... CN).

    Raises:
        SubjectNameError if the string is empty, malformed, or uses an
        unknown attribute key
    """
    if not subject or not subject.strip():
        raise SubjectNameError("Subject name is empty")

    try:
        return x509.Name.from_rfc4514_string(
            _sub_unescaped(_SEPARATOR_SPACE, "", subject),
            _PARSE_KEYS
        )
    except ValueError as e:
        raise SubjectNameError(f"Invalid subject {subject!r}: {e}") from e


def find_leaf(certificates: List[x509.Certificate]) -> Optional[x509.Certificate]:
    """First certificate that does not issue any other certificate in the list."""
    for candidate in certificates:
        issues_other = any(
            other is not candidate and other.issuer == candidate.subject
            for other in certificates
        )
        if not issues_other:
            return candidate
    return certificates[0] if certificates else None


class CertificateBundle:
    """
    A certificate with its optional private key and extra chain certificates.

    The core reads these fields and derives new artifacts; it never mutates
    a bundle it was handed.
    """

    def __init__(
        self,
        certificate: x509.Certificate,
        private_key=None,
        chain: Optional[List[x509.Certificate]] = None
    ):
        self.certificate = certificate
        self.private_key = private_key
        self.chain: List[x509.Certificate] = list(chain or [])

    @property
    def subject(self) -> str:
        return format_name(self.certificate.subject)

    @property
    def has_private_key(self) -> bool:
        return self.private_key is not None

    @property
    def fingerprint(self) -> str:
        return cert_fingerprint(self.certificate)

    def public_key(self):
        return self.certificate.public_key()

    def public_bytes(self, encoding: serialization.Encoding = serialization.Encoding.DER) -> bytes:
        return self.certificate.public_bytes(encoding)

    def export_pkcs12(self, password: str = None, include_private_key: bool = True) -> bytes:
        """
        Export as a PKCS#12 blob.

        Args:
            password: container passphrase; None writes an unencrypted blob
            include_private_key: False exports the certificate and chain only

        Returns:
            DER-encoded PKCS#12 bytes
        """
        key = self.private_key if include_private_key else None
        if password is None:
            encryption = serialization.NoEncryption()
        else:
            encryption = pkcs12_encryption(password)

        return pkcs12.serialize_key_and_certificates(
            name=self.subject.encode('utf-8'),
            key=key,
            cert=self.certificate,
            cas=self.chain or None,
            encryption_algorithm=encryption
        )

    @classmethod
    def from_pkcs12(cls, data: bytes, password: str = None) -> "CertificateBundle":
        """
        Load a bundle from PKCS#12 bytes.

        Args:
            data: PKCS#12 blob
            password: passphrase; None or "" for an unprotected container

        Raises:
            ContainerLoadError if the blob is malformed, the password is
            wrong, or it holds no certificate
        """
        if not data:
            raise ContainerLoadError("PKCS#12 data is empty")

        try:
            loaded = pkcs12.load_pkcs12(data, password.encode('utf-8') if password else None)
        except Exception as e:
            raise ContainerLoadError(f"Failed to load PKCS#12 container: {e}") from e

        others = [entry.certificate for entry in loaded.additional_certs]
        if loaded.cert is not None:
            certificate = loaded.cert.certificate
        else:
            certificate = find_leaf(others)
        if certificate is None:
            raise ContainerLoadError("PKCS#12 container holds no certificate")

        chain = [cert for cert in others if cert is not certificate]
        return cls(certificate, loaded.key, chain)

    @classmethod
    def from_pem(cls, cert_pem: bytes, key_pem: bytes = None) -> "CertificateBundle":
        """Load a bundle from a PEM certificate and optional unencrypted PEM key."""
        certificate = x509.load_pem_x509_certificate(cert_pem)
        key = None
        if key_pem is not None:
            key = serialization.load_pem_private_key(key_pem, password=None)
        return cls(certificate, key)

    def __repr__(self):
        return f"CertificateBundle(subject={self.subject!r}, has_private_key={self.has_private_key})"
