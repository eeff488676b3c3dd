import uuid
from typing import Protocol


class IIDGenerator(Protocol):
    """
    Protocol for record UID generation strategies.
    Stores call it once per inserted record; the UID is stable for the
    lifetime of the record.
    """

    def next_id(self) -> str:
        """Generates the next unique identifier."""
        ...


class UUID4Generator(IIDGenerator):
    """
    Default UID generator using UUIDv4.
    Zero external dependencies.
    """

    def next_id(self) -> str:
        """Returns a string representation of a random UUIDv4."""
        return str(uuid.uuid4())


class SequentialIDGenerator(IIDGenerator):
    """
    Deterministic generator (``prefix-1``, ``prefix-2``, ...).
    Handy in tests that assert on identifiers.
    """

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._counter = 0

    def next_id(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter}"
