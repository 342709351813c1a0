"""Core logic for Peppol directory lookup."""

from peppol_lookup.core.directory_client import DirectoryClient
from peppol_lookup.core.errors import InvalidInputError, RateLimitedError
from peppol_lookup.core.lookup_engine import LookupEngine, lookup_participants

__all__ = [
    "DirectoryClient",
    "InvalidInputError",
    "LookupEngine",
    "RateLimitedError",
    "lookup_participants",
]
