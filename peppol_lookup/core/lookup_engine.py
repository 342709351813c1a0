"""Batch lookup of company identifiers against the Peppol Directory."""

import logging
import math
import time
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Optional

import httpx

from peppol_lookup.core.directory_client import DirectoryClient
from peppol_lookup.core.errors import InvalidInputError, RateLimitedError
from peppol_lookup.data.schemas import (
    Config,
    DirectoryMatch,
    DocumentType,
    FailedLookup,
    LookupOutcome,
    LookupReport,
    OutcomeStatus,
    RegisteredEntry,
)

logger = logging.getLogger(__name__)

# Peppol BIS Billing 3.0 invoice and credit note
COMPLIANT_DOC_TYPES = frozenset(
    {
        "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2::Invoice##urn:cen.eu:en16931:2017#compliant#urn:fdc:peppol.eu:2017:poacc:billing:3.0::2.1",
        "urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2::CreditNote##urn:cen.eu:en16931:2017#compliant#urn:fdc:peppol.eu:2017:poacc:billing:3.0::2.1",
    }
)

RATE_LIMIT_REASON = "rate limited"


def is_compliant(doc_types: Iterable[DocumentType]) -> bool:
    """Check whether any document type is one of the compliant profiles."""
    return any(doc_type.value in COMPLIANT_DOC_TYPES for doc_type in doc_types)


def parse_retry_after(value: Optional[str], default: float = 5.0) -> float:
    """Convert a Retry-After header value into seconds to wait.

    Accepts delta-seconds (decimals tolerated) and HTTP-dates. Missing or
    unparseable values fall back to ``default``.
    """
    if value is None or not str(value).strip():
        return default

    value = str(value).strip()
    try:
        seconds = float(value)
    except ValueError:
        try:
            retry_at = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            logger.debug(f"Unparseable Retry-After header: {value!r}")
            return default
        if retry_at.tzinfo is None:
            retry_at = retry_at.replace(tzinfo=timezone.utc)
        seconds = (retry_at - datetime.now(timezone.utc)).total_seconds()

    if not math.isfinite(seconds):
        return default
    return max(seconds, 0.0)


def dedupe_registered(entries: Iterable[RegisteredEntry]) -> list[RegisteredEntry]:
    """Drop entries repeating a (company_number, compliant) pair, keeping order."""
    seen: set[tuple[str, bool]] = set()
    unique = []
    for entry in entries:
        key = (entry.company_number, entry.compliant)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def _validate_identifiers(identifiers: Any) -> list[str]:
    if isinstance(identifiers, (str, bytes, Mapping)) or not isinstance(identifiers, Sequence):
        raise InvalidInputError("Input must be a non-empty list of company numbers")
    if len(identifiers) == 0:
        raise InvalidInputError("Input must be a non-empty list of company numbers")
    for identifier in identifiers:
        if not isinstance(identifier, str):
            raise InvalidInputError(f"Company numbers must be strings, got {type(identifier).__name__}")
    return list(identifiers)


class LookupEngine:
    """Checks company identifiers for Peppol registration and compliance."""

    def __init__(
        self,
        config: Optional[Config] = None,
        client: Optional[DirectoryClient] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the lookup engine.

        Args:
            config: Configuration for the engine.
            client: Directory client (created from config if not provided).
            sleep: Called with the number of seconds to wait after HTTP 429.
        """
        self.config = config or Config()
        self._owns_client = client is None
        self.client = client or DirectoryClient(self.config)
        self._sleep = sleep

    def lookup_participants(
        self,
        identifiers: Sequence[str],
        batch_size: Optional[int] = None,
    ) -> LookupReport:
        """Look up each identifier in turn and classify it.

        Args:
            identifiers: Non-empty sequence of company numbers.
            batch_size: Accepted for compatibility; lookups run one at a time.

        Returns:
            LookupReport with registered, unregistered and failed identifiers.

        Raises:
            InvalidInputError: If ``identifiers`` is empty or not a list of strings.
        """
        company_numbers = _validate_identifiers(identifiers)
        if batch_size is not None and (
            isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1
        ):
            raise InvalidInputError(f"Batch size must be a positive integer, got {batch_size!r}")
        logger.debug(
            f"Checking {len(company_numbers)} companies sequentially "
            f"(requested batch size: {batch_size or self.config.batch_size})"
        )

        outcomes = [self._lookup_one(number) for number in company_numbers]
        return self._build_report(outcomes)

    def _lookup_one(self, company_number: str) -> LookupOutcome:
        """Query one identifier, waiting and retrying on rate limits."""
        attempts = 0
        while True:
            attempts += 1
            logger.info(f"Checking company {company_number}...")
            try:
                response = self.client.search(company_number)
            except RateLimitedError as e:
                if attempts > self.config.max_rate_limit_retries:
                    logger.warning(f"Giving up on {company_number} after {attempts} rate-limited attempts")
                    return LookupOutcome(
                        identifier=company_number,
                        status=OutcomeStatus.FAILED,
                        reason=RATE_LIMIT_REASON,
                        attempts=attempts,
                    )
                wait = parse_retry_after(e.retry_after, self.config.default_retry_after)
                logger.warning(f"Rate limited, waiting {wait:g}s before retry...")
                self._sleep(wait)
                continue
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    return LookupOutcome(
                        identifier=company_number,
                        status=OutcomeStatus.UNREGISTERED,
                        attempts=attempts,
                    )
                return self._failed(company_number, f"HTTP {e.response.status_code}", attempts)
            except httpx.HTTPError as e:
                return self._failed(company_number, f"{type(e).__name__}: {e}", attempts)
            except ValueError as e:
                return self._failed(company_number, f"Invalid response: {e}", attempts)

            if not response.matches:
                return LookupOutcome(
                    identifier=company_number,
                    status=OutcomeStatus.UNREGISTERED,
                    attempts=attempts,
                )
            return LookupOutcome(
                identifier=company_number,
                status=OutcomeStatus.REGISTERED,
                entries=[self._to_entry(company_number, match) for match in response.matches],
                attempts=attempts,
            )

    def _failed(self, company_number: str, reason: str, attempts: int) -> LookupOutcome:
        logger.warning(f"Error checking company {company_number}: {reason}")
        return LookupOutcome(
            identifier=company_number,
            status=OutcomeStatus.FAILED,
            reason=reason,
            attempts=attempts,
        )

    @staticmethod
    def _to_entry(company_number: str, match: DirectoryMatch) -> RegisteredEntry:
        return RegisteredEntry(
            company_number=company_number,
            compliant=is_compliant(match.doc_types),
            participant_id=match.participant_id.value if match.participant_id else None,
            name=match.display_name,
        )

    @staticmethod
    def _build_report(outcomes: list[LookupOutcome]) -> LookupReport:
        registered: list[RegisteredEntry] = []
        unregistered: list[str] = []
        failed: list[FailedLookup] = []

        for outcome in outcomes:
            if outcome.is_registered:
                registered.extend(outcome.entries)
            elif outcome.is_failed:
                failed.append(FailedLookup(identifier=outcome.identifier, reason=outcome.reason or ""))
            else:
                unregistered.append(outcome.identifier)

        return LookupReport(
            registered=dedupe_registered(registered),
            unregistered=unregistered,
            failed=failed,
            outcomes=outcomes,
        )

    def get_participant_details(self, participant_id: str) -> Any:
        """Fetch full directory details for a participant."""
        return self.client.get_participant_details(participant_id)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "LookupEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def lookup_participants(
    identifiers: Sequence[str],
    config: Optional[Config] = None,
    batch_size: Optional[int] = None,
    **kwargs: Any,
) -> LookupReport:
    """Run a batch lookup with a short-lived engine.

    Args:
        identifiers: Non-empty sequence of company numbers.
        config: Lookup configuration (defaults if not provided).
        batch_size: Requested batch size; lookups still run one at a time.
        **kwargs: Passed to ``LookupEngine`` (``client``, ``sleep``).
    """
    with LookupEngine(config=config, **kwargs) as engine:
        return engine.lookup_participants(identifiers, batch_size=batch_size)
