"""Pydantic DTOs (Data Transfer Objects) for the listener feature."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fancylistener.domain.entities.listener_record import coerce_frames, coerce_text


class ListenerCreate(BaseModel):
    """Listener report posted by the browser extension.

    Only the declared fields are read; unknown keys are dropped. Values of
    the wrong type are normalized to empty rather than rejected.
    """

    model_config = ConfigDict(extra="ignore")

    listener: str = Field("", examples=["function(e){ eval(e.data) }"])
    domain: str = Field("", examples=["example.com"])
    parent_url: str = Field("", examples=["https://example.com/page"])
    stack: str = ""
    fullstack: list[str] = Field(default_factory=list)
    hops: str = ""

    @field_validator("listener", "domain", "parent_url", "stack", "hops", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> str:
        return coerce_text(value)

    @field_validator("fullstack", mode="before")
    @classmethod
    def normalize_frames(cls, value: Any) -> list[str]:
        return coerce_frames(value)


class ListenerResponse(BaseModel):
    """Schema returned to the client."""

    listener: str
    domain: str
    parent_url: str
    stack: str
    fullstack: list[str]
    hops: str
    timestamp: str
    id: float

    model_config = {"from_attributes": True}


class OperationResponse(BaseModel):
    """Outcome of a mutating request."""

    success: bool
    message: str


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatsResponse(_CamelModel):
    """Counts over the current store contents."""

    total: int
    by_domain: dict[str, int]
    by_parent_url: dict[str, int]
    recent_count: int


class AuditSummary(_CamelModel):
    total_listeners: int
    unique_domains: int
    unique_parent_urls: int


class AuditListener(_CamelModel):
    """Per-record detail in the audit export, using the auditor's field names."""

    timestamp: str
    domain: str
    parent_url: str
    listener_code: str
    stack: str
    full_stack: list[str]
    hops: str
    id: float


class AuditReport(_CamelModel):
    """Downloadable snapshot of every record plus summary counts."""

    generated_at: str
    summary: AuditSummary
    listeners: list[AuditListener]
