"""
PKCS#10 request assembly.

The request's public key comes from the subject certificate while the
signature may come from a different key, so the structure is built with
pyasn1 rather than cryptography's CSR builder (which always embeds the
signer's own public key).

    CertificationRequest ::= SEQUENCE {
        certificationRequestInfo  CertificationRequestInfo,
        signatureAlgorithm        AlgorithmIdentifier,
        signature                 BIT STRING }

    CertificationRequestInfo ::= SEQUENCE {
        version        INTEGER { v1(0) },
        subject        Name,
        subjectPKInfo  SubjectPublicKeyInfo,
        attributes     [0] IMPLICIT SET OF Attribute }
"""

import logging

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from pyasn1.codec.der import encoder
from pyasn1.type import univ, namedtype
from pyasn1_modules import rfc2459

from certauth.crypto.rsa_params import RsaPrivateParameters, RsaPublicParameters
from certauth.crypto.sign import rsa_sign

logger = logging.getLogger(__name__)

sha1WithRSAEncryption = univ.ObjectIdentifier('1.2.840.113549.1.1.5')
sha256WithRSAEncryption = univ.ObjectIdentifier('1.2.840.113549.1.1.11')

SIGNATURE_ALGORITHMS = {
    hashes.SHA1.name: sha1WithRSAEncryption,
    hashes.SHA256.name: sha256WithRSAEncryption,
}

# [0] IMPLICIT SET OF Attribute, no attributes
EMPTY_ATTRIBUTES = b'\xa0\x00'


class RSAPublicKey(univ.Sequence):
    """Helper type for encoding an RSA public key"""
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('N', univ.Integer()),
        namedtype.NamedType('E', univ.Integer()))


class CertificationRequestInfo(univ.Sequence):
    """Subject and attributes carry pre-encoded DER."""
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('version', univ.Integer()),
        namedtype.NamedType('subject', univ.Any()),
        namedtype.NamedType('subjectPKInfo', rfc2459.SubjectPublicKeyInfo()),
        namedtype.NamedType('attributes', univ.Any()))


class CertificationRequest(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('certificationRequestInfo', CertificationRequestInfo()),
        namedtype.NamedType('signatureAlgorithm', rfc2459.AlgorithmIdentifier()),
        namedtype.NamedType('signature', univ.BitString()))


def _algorithm_identifier(oid: univ.ObjectIdentifier) -> rfc2459.AlgorithmIdentifier:
    algorithmIdentifier = rfc2459.AlgorithmIdentifier()
    algorithmIdentifier['algorithm'] = oid
    # Directly setting parameters to univ.Null doesn't work
    algorithmIdentifier['parameters'] = univ.Any(encoder.encode(univ.Null()))
    return algorithmIdentifier


def subject_public_key_info(public: RsaPublicParameters) -> rfc2459.SubjectPublicKeyInfo:
    """SubjectPublicKeyInfo for an RSA modulus/exponent pair."""
    rsaKey = RSAPublicKey()
    rsaKey['N'] = univ.Integer(public.modulus)
    rsaKey['E'] = univ.Integer(public.exponent)

    spki = rfc2459.SubjectPublicKeyInfo()
    spki['algorithm'] = _algorithm_identifier(rfc2459.rsaEncryption)
    spki['subjectPublicKey'] = univ.BitString.fromOctetString(encoder.encode(rsaKey))
    return spki


def build_request(
    subject: x509.Name,
    public: RsaPublicParameters,
    signer: RsaPrivateParameters,
    algorithm: hashes.HashAlgorithm
) -> bytes:
    """
    Build and sign a PKCS#10 request in one pass.

    Args:
        subject: request subject name
        public: public key placed in the request
        signer: private key that signs the request info
        algorithm: hashes.SHA1() or hashes.SHA256()

    Returns:
        DER-encoded CertificationRequest

    Raises:
        ValueError if the hash algorithm is not SHA-1 or SHA-256
        SigningError if the signature cannot be computed
    """
    if algorithm.name not in SIGNATURE_ALGORITHMS:
        raise ValueError(f"Unsupported request hash algorithm: {algorithm.name}")

    info = CertificationRequestInfo()
    info['version'] = 0
    info['subject'] = univ.Any(subject.public_bytes())
    info['subjectPKInfo'] = subject_public_key_info(public)
    info['attributes'] = univ.Any(EMPTY_ATTRIBUTES)

    signature = rsa_sign(signer, encoder.encode(info), algorithm)

    request = CertificationRequest()
    request['certificationRequestInfo'] = info
    request['signatureAlgorithm'] = _algorithm_identifier(SIGNATURE_ALGORITHMS[algorithm.name])
    request['signature'] = univ.BitString.fromOctetString(signature)

    logger.debug(f"Built {algorithm.name.upper()}withRSA request for {subject.rfc4514_string()}")
    return encoder.encode(request)
