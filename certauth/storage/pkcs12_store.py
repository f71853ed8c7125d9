"""In-memory PKCS#12 key store: load, add one key entry, save."""

import logging
from typing import Dict, List, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12

from certauth.common.config import pkcs12_encryption
from certauth.common.errors import ContainerLoadError, ContainerSaveError
from certauth.crypto.pki import find_leaf

logger = logging.getLogger(__name__)


class Pkcs12Store:
    """
    Transient PKCS#12 container.

    Holds the certificate entries of a loaded blob and at most one private
    key entry. Lives for a single operation; not thread-safe.
    """

    def __init__(self):
        self.certificate_entries: List[x509.Certificate] = []
        self.key_entries: Dict[str, Tuple[object, List[x509.Certificate]]] = {}

    def load(self, data: bytes, password: str = None):
        """
        Load certificate entries from a PKCS#12 blob.

        Args:
            data: PKCS#12 bytes
            password: passphrase, None for an unprotected blob

        Raises:
            ContainerLoadError if the blob is malformed or holds no certificate
        """
        if not data:
            raise ContainerLoadError("PKCS#12 data is empty")

        try:
            loaded = pkcs12.load_pkcs12(data, password.encode('utf-8') if password else None)
        except Exception as e:
            raise ContainerLoadError(f"Failed to load PKCS#12 container: {e}") from e

        entries = []
        if loaded.cert is not None:
            entries.append(loaded.cert.certificate)
        entries.extend(entry.certificate for entry in loaded.additional_certs)
        if not entries:
            raise ContainerLoadError("PKCS#12 container holds no certificate")

        self.certificate_entries = entries
        logger.debug(f"Loaded PKCS#12 container with {len(entries)} certificate(s)")

    def leaf_certificate(self) -> Optional[x509.Certificate]:
        """The end-entity certificate among the loaded entries."""
        return find_leaf(self.certificate_entries)

    def set_key_entry(self, alias: str, key, chain: List[x509.Certificate]):
        """
        Add the private key entry, replacing any previous one.

        Args:
            alias: friendly name for the entry
            key: private key
            chain: leaf certificate first, then issuers
        """
        if not chain:
            raise ContainerSaveError("A key entry needs at least one certificate")
        self.key_entries = {alias: (key, list(chain))}

    def save(self, password: str) -> bytes:
        """
        Serialize the key entry and its chain, encrypted under password.

        Raises:
            ContainerSaveError if there is no key entry or serialization fails
        """
        if not self.key_entries:
            raise ContainerSaveError("PKCS#12 container has no key entry to save")

        alias, (key, chain) = next(iter(self.key_entries.items()))
        try:
            return pkcs12.serialize_key_and_certificates(
                name=alias.encode('utf-8'),
                key=key,
                cert=chain[0],
                cas=chain[1:] or None,
                encryption_algorithm=pkcs12_encryption(password)
            )
        except Exception as e:
            raise ContainerSaveError(f"Failed to save PKCS#12 container: {e}") from e
