"""Data layer for Peppol directory lookup."""

from peppol_lookup.data.schemas import (
    Config,
    DirectoryMatch,
    DirectoryResponse,
    DocumentType,
    FailedLookup,
    LookupOutcome,
    LookupReport,
    OutcomeStatus,
    RegisteredEntry,
)

__all__ = [
    "Config",
    "DirectoryMatch",
    "DirectoryResponse",
    "DocumentType",
    "FailedLookup",
    "LookupOutcome",
    "LookupReport",
    "OutcomeStatus",
    "RegisteredEntry",
]
