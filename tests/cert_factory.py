"""Build throwaway CA and entity certificates for the test suites."""

from datetime import datetime, timedelta, timezone
from functools import lru_cache

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa


@lru_cache(maxsize=None)
def rsa_key(label: str, bits: int = 2048):
    """Generate (once per label) an RSA private key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


def make_name(common_name: str, state: str = u"Washington", country: str = u"US",
              organization: str = None) -> x509.Name:
    """Name in DER order C, ST, [O,] CN."""
    attributes = [
        x509.NameAttribute(NameOID.COUNTRY_NAME, country),
        x509.NameAttribute(NameOID.STATE_OR_PROVINCE_NAME, state),
    ]
    if organization:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
    attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    return x509.Name(attributes)


def _builder(subject: x509.Name, issuer: x509.Name, public_key, valid_days: int):
    now = datetime.now(timezone.utc)
    return x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        public_key
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now - timedelta(minutes=5)
    ).not_valid_after(
        now + timedelta(days=valid_days)
    )


def self_signed(private_key, subject: x509.Name, valid_days: int = 365,
                ca: bool = False) -> x509.Certificate:
    """Self-signed certificate for private_key."""
    return _builder(subject, subject, private_key.public_key(), valid_days).add_extension(
        x509.BasicConstraints(ca=ca, path_length=None),
        critical=True,
    ).sign(private_key, hashes.SHA256())


def issue(ca_cert: x509.Certificate, ca_key, subject: x509.Name, public_key,
          valid_days: int = 365) -> x509.Certificate:
    """Certificate for public_key signed by the CA."""
    return _builder(subject, ca_cert.subject, public_key, valid_days).add_extension(
        x509.BasicConstraints(ca=False, path_length=None),
        critical=True,
    ).sign(ca_key, hashes.SHA256())


@lru_cache(maxsize=None)
def root_ca():
    """(certificate, key) of the test Root CA."""
    key = rsa_key("ca")
    return self_signed(key, make_name(u"Test Root CA", organization=u"certauth"), 3650, ca=True), key
