import pytest
from pydantic import ValidationError as PydanticValidationError

from core.models.signing import SigningSecret


class TestSigningSecret:
    def test_from_hex_decodes_bytes(self) -> None:
        secret = SigningSecret.from_hex("00" * 32, "11" * 32)

        assert secret.key_bytes() == b"\x00" * 32
        assert secret.salt_bytes() == b"\x11" * 32

    def test_accepts_longer_secret_material(self) -> None:
        secret = SigningSecret.from_hex("ab" * 64, "cd" * 64)

        assert len(secret.key_bytes()) == 64
        assert len(secret.salt_bytes()) == 64

    @pytest.mark.parametrize(
        "key_hex,salt_hex",
        [
            ("", "11"),
            ("00", "  "),
            ("zz", "11"),
            ("000", "11"),
        ],
    )
    def test_rejects_empty_or_malformed_hex(self, key_hex, salt_hex) -> None:
        with pytest.raises(ValueError):
            SigningSecret.from_hex(key_hex, salt_hex)

    def test_secret_values_are_not_rendered(self) -> None:
        secret = SigningSecret.from_hex("deadbeef", "cafebabe")

        rendered = repr(secret) + str(secret) + secret.model_dump_json()

        assert "deadbeef" not in rendered
        assert "\\xde\\xad" not in rendered

    def test_is_immutable(self) -> None:
        secret = SigningSecret.from_hex("00", "11")

        with pytest.raises(PydanticValidationError):
            secret.key = secret.salt  # type: ignore[misc]
