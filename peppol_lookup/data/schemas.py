"""Pydantic data models for Peppol directory lookup."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutcomeStatus(str, Enum):
    """Classification of a single identifier lookup."""

    REGISTERED = "registered"
    UNREGISTERED = "unregistered"
    FAILED = "failed"


class DocumentType(BaseModel):
    """A document type a participant declares it can receive."""

    model_config = ConfigDict(extra="ignore")

    scheme: Optional[str] = Field(None, description="Document type identifier scheme")
    value: str = Field(..., description="Document type identifier value")


class ParticipantIdentifier(BaseModel):
    """Peppol participant identifier (scheme + value)."""

    model_config = ConfigDict(extra="ignore")

    scheme: Optional[str] = Field(None, description="Participant identifier scheme")
    value: str = Field(..., description="Participant identifier value, e.g. 0208:0769377373")


class EntityName(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    language: Optional[str] = None


class BusinessEntity(BaseModel):
    """Business card entity attached to a directory match."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: list[EntityName] = Field(default_factory=list)
    country_code: Optional[str] = Field(None, alias="countryCode")

    @field_validator("name", mode="before")
    @classmethod
    def wrap_plain_name(cls, v):
        """Accept a bare string as a single unlabelled name."""
        if isinstance(v, str):
            return [{"name": v}]
        return v


class DirectoryMatch(BaseModel):
    """One participant entry returned by the directory search."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    participant_id: Optional[ParticipantIdentifier] = Field(None, alias="participantID")
    doc_types: list[DocumentType] = Field(default_factory=list, alias="docTypes")
    entities: list[BusinessEntity] = Field(default_factory=list)

    @property
    def display_name(self) -> Optional[str]:
        """First entity name, if the match carries a business card."""
        for entity in self.entities:
            if entity.name:
                return entity.name[0].name
        return None


class DirectoryResponse(BaseModel):
    """Decoded body of a directory search request."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_result_count: Optional[int] = Field(None, alias="total-result-count")
    matches: list[DirectoryMatch] = Field(..., description="Participants matching the query")


class RegisteredEntry(BaseModel):
    """A registered participant found for a company number."""

    model_config = ConfigDict(frozen=True)

    company_number: str = Field(..., description="The identifier that was queried")
    compliant: bool = Field(
        ..., description="Whether the participant supports a Peppol BIS Billing 3.0 document type"
    )
    participant_id: Optional[str] = Field(None, description="Peppol participant identifier")
    name: Optional[str] = Field(None, description="Business name from the directory")


class FailedLookup(BaseModel):
    """An identifier whose lookup could not be completed."""

    identifier: str
    reason: str


class LookupOutcome(BaseModel):
    """Result of looking up one identifier."""

    identifier: str = Field(..., description="The identifier that was queried")
    status: OutcomeStatus
    entries: list[RegisteredEntry] = Field(default_factory=list)
    reason: Optional[str] = Field(None, description="Failure reason for failed lookups")
    attempts: int = Field(1, ge=1, description="Requests issued, including rate-limit retries")

    @property
    def is_registered(self) -> bool:
        return self.status == OutcomeStatus.REGISTERED

    @property
    def is_failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED


class LookupReport(BaseModel):
    """Aggregate result of a batch lookup."""

    registered: list[RegisteredEntry] = Field(default_factory=list)
    unregistered: list[str] = Field(default_factory=list)
    failed: list[FailedLookup] = Field(default_factory=list)
    outcomes: list[LookupOutcome] = Field(
        default_factory=list, description="One outcome per input identifier, in input order"
    )

    @property
    def compliant(self) -> list[RegisteredEntry]:
        """Registered entries supporting a compliant document type."""
        return [entry for entry in self.registered if entry.compliant]

    @property
    def total(self) -> int:
        return len(self.outcomes)


class Config(BaseModel):
    """Configuration for Peppol directory lookup."""

    base_url: str = Field(
        "https://directory.peppol.eu/search/1.0/json",
        description="Base URL of the directory search JSON API",
    )
    timeout_seconds: float = Field(10.0, gt=0.0, description="Per-request timeout in seconds")
    default_retry_after: float = Field(
        5.0, ge=0.0, description="Wait in seconds after HTTP 429 without a Retry-After header"
    )
    max_rate_limit_retries: int = Field(
        5, ge=0, description="Rate-limit retries per identifier before giving up"
    )
    batch_size: int = Field(
        50, ge=1, description="Requested batch size (lookups always run sequentially)"
    )
    output_format: str = Field("json", description="Default output format")
    output_directory: str = Field("results", description="Output directory for exports")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL is set and has no trailing slash."""
        url = v.strip().rstrip("/")
        if not url:
            raise ValueError("Base URL cannot be empty")
        return url

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        fmt = v.lower().strip()
        if fmt not in ("json", "csv"):
            raise ValueError(f"Unsupported output format: {v}")
        return fmt
