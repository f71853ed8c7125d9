"""Environment-driven settings (.env supported) and logging setup."""

import os
import logging

from dotenv import load_dotenv
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs12

# Load environment variables
load_dotenv()

LOG_LEVEL = os.getenv("CERTAUTH_LOG_LEVEL", "INFO")
PKCS12_ENCRYPTION = os.getenv("CERTAUTH_PKCS12_ENCRYPTION", "aes256")
PKCS12_KDF_ROUNDS = int(os.getenv("CERTAUTH_PKCS12_KDF_ROUNDS", "50000"))

LOG_FORMAT = '%(asctime)s [CERTAUTH] %(message)s'


def configure_logging(level: str = None):
    """
    Configure root logging for applications embedding certauth.

    Args:
        level: level name; defaults to CERTAUTH_LOG_LEVEL
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT
    )


def pkcs12_encryption(passphrase: str) -> serialization.KeySerializationEncryption:
    """
    Build the encryption used when re-serializing a PKCS#12 container.

    Args:
        passphrase: container passphrase

    Returns:
        cryptography encryption object for pkcs12.serialize_key_and_certificates

    Raises:
        ValueError if CERTAUTH_PKCS12_ENCRYPTION names an unknown scheme
    """
    builder = serialization.PrivateFormat.PKCS12.encryption_builder().kdf_rounds(
        PKCS12_KDF_ROUNDS
    )

    scheme = PKCS12_ENCRYPTION.lower()
    if scheme == "aes256":
        builder = builder.key_cert_algorithm(
            pkcs12.PBES.PBESv2SHA256AndAES256CBC
        ).hmac_hash(hashes.SHA256())
    elif scheme == "legacy":
        # 3DES + SHA-1 MAC for importers that predate PBES2
        builder = builder.key_cert_algorithm(
            pkcs12.PBES.PBESv1SHA1And3KeyTripleDESCBC
        ).hmac_hash(hashes.SHA1())
    else:
        raise ValueError(f"Unknown PKCS#12 encryption scheme: {PKCS12_ENCRYPTION}")

    return builder.build(passphrase.encode('utf-8'))
