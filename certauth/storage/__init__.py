"""Storage layer: transient PKCS#12 container."""

from .pkcs12_store import Pkcs12Store

__all__ = [
    "Pkcs12Store",
]
