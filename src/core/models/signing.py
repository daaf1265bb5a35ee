"""Signing secret used to authenticate transformation URLs."""

import binascii

from pydantic import BaseModel, ConfigDict, Field, SecretBytes


class SigningSecret(BaseModel):
    """Key/salt pair shared with the transformation renderer.

    Both values are held as `SecretBytes` so the secret never shows up
    in reprs, logs or serialized settings.
    """

    model_config = ConfigDict(frozen=True)

    key: SecretBytes = Field(..., description="HMAC key bytes")
    salt: SecretBytes = Field(..., description="Salt prepended to every signed path")

    @classmethod
    def from_hex(cls, key_hex: str, salt_hex: str) -> "SigningSecret":
        """Build a secret from hex-encoded key and salt.

        Raises:
            ValueError: If either value is empty or not valid hex.
        """
        return cls(key=decode_hex(key_hex, "key"), salt=decode_hex(salt_hex, "salt"))

    def key_bytes(self) -> bytes:
        return self.key.get_secret_value()

    def salt_bytes(self) -> bytes:
        return self.salt.get_secret_value()


def decode_hex(value: str, name: str) -> bytes:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"Signing {name} must not be empty")

    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Signing {name} is not valid hex") from exc
