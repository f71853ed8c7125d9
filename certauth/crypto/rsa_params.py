"""RSA key parameters: export native keys to big-integer parameter models."""

import logging
from contextlib import contextmanager
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from cryptography.hazmat.primitives.asymmetric import rsa

from certauth.common.errors import KeyExtractionError
from certauth.common.utils import int_to_bytes

logger = logging.getLogger(__name__)


class RsaKeyParameters(BaseModel):
    """Modulus and public exponent shared by both parameter kinds."""
    model_config = ConfigDict(frozen=True)

    modulus: int
    exponent: int

    @field_validator("*", mode="after")
    @classmethod
    def check_non_negative(cls, value):
        if isinstance(value, int) and value < 0:
            raise KeyExtractionError("RSA parameters must be non-negative")
        return value

    @property
    def key_size(self) -> int:
        return self.modulus.bit_length()

    def public_numbers(self) -> rsa.RSAPublicNumbers:
        return rsa.RSAPublicNumbers(e=self.exponent, n=self.modulus)

    def public_key(self) -> rsa.RSAPublicKey:
        """Rebuild a cryptography public key from the parameters."""
        try:
            return self.public_numbers().public_key()
        except ValueError as e:
            raise KeyExtractionError(f"Invalid RSA public parameters: {e}") from e

    def to_bytes(self) -> Dict[str, bytes]:
        """Export every integer field as a big-endian magnitude."""
        return {
            name: int_to_bytes(value)
            for name, value in self
            if isinstance(value, int)
        }


class RsaPublicParameters(RsaKeyParameters):
    """Result of a public-only export."""
    kind: str = Field(default="public")

    @model_validator(mode="after")
    def check_public(self):
        if self.modulus == 0 or self.exponent == 0:
            raise KeyExtractionError("RSA modulus and exponent must be non-zero")
        return self

    @classmethod
    def from_bytes(cls, modulus: bytes, exponent: bytes) -> "RsaPublicParameters":
        """Build from big-endian byte fields; the high bit never marks a sign."""
        return cls(
            modulus=int.from_bytes(modulus, 'big'),
            exponent=int.from_bytes(exponent, 'big'),
        )


class RsaPrivateParameters(RsaKeyParameters):
    """
    Result of a full private export: modulus, exponent, private exponent
    and the CRT values P, Q, DP, DQ, InverseQ.
    """
    kind: str = Field(default="private")
    d: int
    p: int
    q: int
    dp: int
    dq: int
    inverse_q: int

    @model_validator(mode="after")
    def check_consistency(self):
        n, e = self.modulus, self.exponent
        p, q = self.p, self.q
        if n == 0 or e == 0 or self.d == 0:
            raise KeyExtractionError("RSA modulus and exponents must be non-zero")
        if p < 2 or q < 2 or p * q != n:
            raise KeyExtractionError("RSA primes do not multiply to the modulus")
        if self.d % (p - 1) != self.dp or self.d % (q - 1) != self.dq:
            raise KeyExtractionError("RSA CRT exponents do not match the private exponent")
        if (e * self.dp) % (p - 1) != 1 or (e * self.dq) % (q - 1) != 1:
            raise KeyExtractionError("RSA private exponent does not invert the public exponent")
        if (self.inverse_q * q) % p != 1:
            raise KeyExtractionError("RSA CRT coefficient is not the inverse of Q mod P")
        return self

    @classmethod
    def from_bytes(
        cls,
        modulus: bytes,
        exponent: bytes,
        d: bytes,
        p: bytes,
        q: bytes,
        dp: bytes,
        dq: bytes,
        inverse_q: bytes
    ) -> "RsaPrivateParameters":
        """Build from big-endian byte fields; the high bit never marks a sign."""
        fields = dict(
            modulus=modulus, exponent=exponent, d=d, p=p, q=q,
            dp=dp, dq=dq, inverse_q=inverse_q,
        )
        return cls(**{name: int.from_bytes(raw, 'big') for name, raw in fields.items()})

    def to_public(self) -> RsaPublicParameters:
        return RsaPublicParameters(modulus=self.modulus, exponent=self.exponent)

    def private_key(self) -> rsa.RSAPrivateKey:
        """
        Rebuild a cryptography private key usable for signing.

        Raises:
            KeyExtractionError if the backend rejects the parameters
        """
        numbers = rsa.RSAPrivateNumbers(
            p=self.p,
            q=self.q,
            d=self.d,
            dmp1=self.dp,
            dmq1=self.dq,
            iqmp=self.inverse_q,
            public_numbers=self.public_numbers(),
        )
        try:
            return numbers.private_key()
        except ValueError as e:
            raise KeyExtractionError(f"Invalid RSA private parameters: {e}") from e


def export_public_parameters(key) -> RsaPublicParameters:
    """
    Export modulus and exponent of an RSA key.

    Args:
        key: RSA public or private key

    Returns:
        RsaPublicParameters

    Raises:
        KeyExtractionError if the key is not RSA or cannot be exported
    """
    if isinstance(key, rsa.RSAPrivateKey):
        key = key.public_key()
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyExtractionError(f"Expected an RSA key, got {type(key).__name__}")

    try:
        numbers = key.public_numbers()
    except Exception as e:
        raise KeyExtractionError(f"RSA public parameters are not exportable: {e}") from e

    return RsaPublicParameters(modulus=numbers.n, exponent=numbers.e)


def export_private_parameters(key) -> RsaPrivateParameters:
    """
    Export the full private parameter set of an RSA private key.

    Args:
        key: RSA private key

    Returns:
        RsaPrivateParameters

    Raises:
        KeyExtractionError if the key is public-only, not RSA, not exportable,
        or its parameters are inconsistent
    """
    if isinstance(key, rsa.RSAPublicKey):
        raise KeyExtractionError("Private parameters requested from a public key")
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyExtractionError(f"Expected an RSA private key, got {type(key).__name__}")

    try:
        numbers = key.private_numbers()
    except Exception as e:
        raise KeyExtractionError(f"RSA private parameters are not exportable: {e}") from e

    params = RsaPrivateParameters(
        modulus=numbers.public_numbers.n,
        exponent=numbers.public_numbers.e,
        d=numbers.d,
        p=numbers.p,
        q=numbers.q,
        dp=numbers.dmp1,
        dq=numbers.dmq1,
        inverse_q=numbers.iqmp,
    )
    logger.debug(f"Exported private parameters of a {params.key_size}-bit RSA key")
    return params


def export_parameters(key, include_private: bool) -> Union[RsaPublicParameters, RsaPrivateParameters]:
    """Export public-only or full parameters; the result type follows the mode."""
    if include_private:
        return export_private_parameters(key)
    return export_public_parameters(key)


@contextmanager
def rsa_private_key(bundle):
    """
    Acquire the RSA private key held by a certificate bundle.

    Raises:
        KeyExtractionError if the bundle has no RSA private key
    """
    key = bundle.private_key
    if key is None:
        raise KeyExtractionError(f"Certificate '{bundle.subject}' has no private key")
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyExtractionError(
            f"Certificate '{bundle.subject}' private key is not RSA ({type(key).__name__})"
        )
    yield key


@contextmanager
def rsa_public_key(bundle):
    """Acquire the RSA public key of a certificate bundle."""
    key = bundle.public_key()
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyExtractionError(
            f"Certificate '{bundle.subject}' public key is not RSA ({type(key).__name__})"
        )
    yield key
