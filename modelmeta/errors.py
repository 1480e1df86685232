# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Exception hierarchy shared by every topic.
#
# HIERARCHY:
# ----------
#   MetaError
#   ├── ConfigError
#   ├── HostNotPersistedError
#   ├── StorageError
#   └── EntryError              (carries the offending key)
#       ├── NotFoundError
#       ├── DecodeError
#       └── EncodeError
#           └── InvalidReferenceError
#
# ==============================================

from typing import Optional


class MetaError(Exception):
    """Base class for all metadata errors."""


class ConfigError(MetaError):
    """Raised when a configuration value is invalid."""


class HostNotPersistedError(MetaError):
    """Raised when metadata is flushed for a host that has no id yet."""


class StorageError(MetaError):
    """
    Wraps a row-store failure.

    `key` is the metadata key being written when the failure happened
    during a flush, or None for load failures.
    """

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class EntryError(MetaError):
    """An error attributable to a single metadata key."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key

    def with_key(self, key: str) -> "EntryError":
        # Codec errors are raised without a key; the entry fills it in.
        if self.key is None:
            self.key = key
        return self


class NotFoundError(EntryError):
    """A referenced entity does not exist (or its type is unknown)."""


class DecodeError(EntryError):
    """A stored payload cannot be decoded for its type tag."""


class EncodeError(EntryError):
    """A value cannot be encoded into a single storage column."""


class InvalidReferenceError(EncodeError):
    """A reference was set to an entity that has not been persisted."""
