"""Service protocols for dependency inversion.

Collaborators the orchestrators depend on without importing concrete
implementations: where the API credential comes from, and where freshly
fetched snapshots are pushed for backend sync.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of the active player's API key.

    Example:
        >>> from tornsentinel.services.credentials import StaticCredentialProvider
        >>> provider: CredentialProvider = StaticCredentialProvider("abc")
        >>> provider.get_credential()
        'abc'
    """

    def get_credential(self) -> str | None:
        """Return the API key, or None when no key is configured."""


@runtime_checkable
class SnapshotSink(Protocol):
    """Receiver of freshly fetched snapshots (e.g. a backend sync job).

    Implementations may be slow or fail; callers log failures and carry on.
    """

    async def publish(self, resource: Any, value: Any) -> None:
        """Publish one freshly fetched snapshot.

        Args:
            resource: The ``ResourceKey`` the value belongs to
            value: The canonical snapshot
        """
