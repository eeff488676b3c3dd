"""Configuration of the web storage adapter."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WebStorageConfig:
    """Web storage configuration.

    Attributes:
        session: Use a session-scoped storage that disappears with the
            process (like ``sessionStorage``) instead of a persistent one.
        data_dir: Directory of the persistent storage (like
            ``localStorage``). Ignored for session storage.
    """

    session: bool = False
    data_dir: str = ".localStorage"
