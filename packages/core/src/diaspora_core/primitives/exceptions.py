"""Configuration, lifecycle and persistence exceptions for diaspora-core."""

from __future__ import annotations

from difflib import get_close_matches


class DiasporaError(Exception):
    """Root exception for the entire diaspora toolkit."""


# ── Configuration ────────────────────────────────────────────────────


class ConfigurationError(DiasporaError):
    """Base class for errors raised while wiring adapters and data sources."""


class InvalidNameError(ConfigurationError):
    """Raised when a name that must be a non-empty string is not one."""

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f'{kind} name must be a non empty string, had "{value}"')


class AdapterRegistrationError(ConfigurationError):
    """Raised when an adapter label is registered twice or with a non-adapter class."""


class DataSourceRegistrationError(ConfigurationError):
    """Raised when a data source name is already taken."""


class UnknownAdapterError(ConfigurationError):
    """Raised when a data source is requested for an unregistered adapter label.

    Provides fuzzy-matched suggestions for likely intended labels.
    """

    def __init__(self, label: str, available: list[str]) -> None:
        self.label = label
        self.available = available
        self.suggestions = get_close_matches(label, available, n=3, cutoff=0.6)

        message = f'Unknown adapter "{label}".'
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Available currently are {', '.join(sorted(available))}"
        super().__init__(message)


class RemapConflictError(ConfigurationError):
    """Raised when two entity fields of a table map to the same store field."""

    def __init__(self, table: str, store_field: str, fields: tuple[str, str]) -> None:
        self.table = table
        self.store_field = store_field
        self.fields = fields
        super().__init__(
            f'Table "{table}": fields "{fields[0]}" and "{fields[1]}" '
            f'both map to store field "{store_field}"'
        )


class AdapterCapabilityError(ConfigurationError):
    """Raised when an adapter class leaves a CRUD pair without a native side.

    Usage: checked once when the adapter subclass is created, so the
    "neither implemented" case can never recurse at call time.
    """


# ── Lifecycle ────────────────────────────────────────────────────────


class AdapterStateError(DiasporaError):
    """Raised on an illegal adapter lifecycle transition (e.g. leaving ``error``)."""


# ── Persistence ──────────────────────────────────────────────────────


class PersistenceError(DiasporaError):
    """Base class for all store I/O errors."""


class WebStorageError(PersistenceError):
    """Raised when the key/value storage medium cannot be read or written."""


class WebApiError(PersistenceError):
    """Raised when the remote web API answers with an error or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
