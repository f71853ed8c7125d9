"""Error taxonomy shared by the extractor, combiner and request builder."""


class CertificateAuthorityError(Exception):
    """Base class for every error raised by certauth."""
    pass


class KeyExtractionError(CertificateAuthorityError):
    """Raised when a key is missing, not RSA, not exportable, or inconsistent."""
    pass


class ContainerLoadError(CertificateAuthorityError):
    """Raised when a PKCS#12 blob is malformed, empty, or the password is wrong."""
    pass


class ContainerSaveError(CertificateAuthorityError):
    """Raised when a PKCS#12 container cannot be serialized."""
    pass


class PemParseError(CertificateAuthorityError):
    """Raised when PEM text does not hold a usable private key."""
    pass


class SigningError(CertificateAuthorityError):
    """Raised when the signature over a request cannot be computed."""
    pass


class ReimportError(CertificateAuthorityError):
    """Raised when a freshly saved PKCS#12 blob cannot be loaded back."""
    pass


class SubjectNameError(CertificateAuthorityError):
    """Raised when a distinguished-name string cannot be parsed."""
    pass
