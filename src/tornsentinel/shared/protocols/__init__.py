"""Protocol interfaces shared across layers."""

from .services import CredentialProvider, SnapshotSink

__all__ = ["CredentialProvider", "SnapshotSink"]
