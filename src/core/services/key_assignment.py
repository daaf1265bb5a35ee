"""Collision-free storage key assignment for uploads.

Untrusted filenames are reduced to a safe stem, an allow-listed
extension and a random token. Candidate keys are probed against the
blob store and regenerated on collision, up to a fixed number of
attempts.

The probe is check-then-act: two concurrent uploads can still pick the
same key between the probe and the write. Writes therefore go through a
conditional put, which makes the blob store the final arbiter.
"""

import os
import re
import secrets
from collections.abc import Callable

from aws_lambda_powertools import Logger

from core.models.errors import (
    KeyAssignmentExhaustedError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from core.models.storage import StorageKey
from core.repositories.blob_store import BlobStore
from core.utils.constants import (
    ALLOWED_EXTENSIONS,
    KEY_ASSIGNMENT_MAX_ATTEMPTS,
    KEY_STEM_MAX_LENGTH,
    KEY_TOKEN_BYTES,
    UNSAFE_KEY_CHARS_PATTERN,
)

logger = Logger(UTC=True)

TokenFactory = Callable[[], str]

_UNSAFE_CHARS = re.compile(UNSAFE_KEY_CHARS_PATTERN)


def default_token() -> str:
    """Eight lowercase hex characters from the OS CSPRNG."""
    return secrets.token_hex(KEY_TOKEN_BYTES)


def base_name(filename: str) -> str:
    """Drop every directory component, for both POSIX and Windows separators."""
    return filename.replace("\\", "/").rsplit("/", 1)[-1]


def sanitize_stem(name: str, max_length: int = KEY_STEM_MAX_LENGTH) -> str:
    """Replace characters outside [A-Za-z0-9-_] with '_' and truncate."""
    return _UNSAFE_CHARS.sub("_", name)[:max_length]


def extract_extension(name: str) -> str:
    """Return the lower-cased, allow-listed extension of a base name.

    Raises:
        UnsupportedMediaTypeError: If there is no extension or it is not allowed.
    """
    extension = os.path.splitext(name)[1].lstrip(".").lower()

    if not extension:
        raise UnsupportedMediaTypeError(
            message="File name must have an extension",
            details={"filename": name},
        )

    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedMediaTypeError(
            message=(
                f"File extension '{extension}' is not allowed. "
                f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            ),
            details={"extension": extension},
        )

    return extension


def normalize_folder(folder: str | None) -> str:
    """Turn an untrusted folder into a safe '/'-joined prefix.

    Raises:
        ValidationError: If the folder tries to climb with '..'.
    """
    segments: list[str] = []

    for segment in (folder or "").replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise ValidationError(
                message="Folder must not contain '..' segments",
                details={"folder": folder},
            )
        segments.append(sanitize_stem(segment))

    return "/".join(segments)


class KeyAssignmentService:
    """Assigns unique storage keys within a bucket/folder namespace."""

    def __init__(
        self,
        blob_store: BlobStore,
        *,
        token_factory: TokenFactory = default_token,
        max_attempts: int = KEY_ASSIGNMENT_MAX_ATTEMPTS,
        stem_max_length: int = KEY_STEM_MAX_LENGTH,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._blob_store = blob_store
        self._token_factory = token_factory
        self._max_attempts = max_attempts
        self._stem_max_length = stem_max_length

    def prepare(self, filename: str, folder: str | None) -> tuple[str, str, str]:
        """Validate inputs and return (folder, stem, extension).

        Raises:
            ValidationError: If the filename is empty or has no base name
            UnsupportedMediaTypeError: If the extension is not allowed
        """
        if not filename or not filename.strip():
            raise ValidationError(message="File name must not be empty")

        name = base_name(filename.strip())
        if not name:
            raise ValidationError(
                message="File name must not be a directory",
                details={"filename": filename},
            )

        extension = extract_extension(name)
        stem = sanitize_stem(name, self._stem_max_length)

        return normalize_folder(folder), stem, extension

    def assign_key(self, filename: str, folder: str | None, bucket: str) -> StorageKey:
        """Produce a key that did not exist in the bucket at probe time.

        Raises:
            ValidationError: If the filename or folder is invalid
            UnsupportedMediaTypeError: If the extension is not allowed
            KeyAssignmentExhaustedError: If every attempt collided
            StorageError: If the existence probe fails
        """
        safe_folder, stem, extension = self.prepare(filename, folder)

        for attempt in range(1, self._max_attempts + 1):
            candidate = StorageKey(
                folder=safe_folder,
                stem=stem,
                token=self._token_factory(),
                extension=extension,
            )

            if not self._blob_store.exists(bucket, candidate.key):
                logger.debug(
                    "Storage key assigned",
                    extra={"bucket": bucket, "key": candidate.key, "attempt": attempt},
                )
                return candidate

            logger.warning(
                "Storage key collision, regenerating token",
                extra={"bucket": bucket, "key": candidate.key, "attempt": attempt},
            )

        logger.error(
            "Storage key assignment exhausted",
            extra={
                "bucket": bucket,
                "folder": safe_folder,
                "stem": stem,
                "attempts": self._max_attempts,
            },
        )
        raise KeyAssignmentExhaustedError(
            message="Unable to assign a unique storage key",
            details={"bucket": bucket, "attempts": self._max_attempts},
        )
