"""Base protocol and types for the upstream model catalog."""

import logging
import math
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_MODALITY = "text->text"


class UpstreamFetchError(Exception):
    """Raised when the catalog source cannot be read.

    Covers non-2xx responses, network failures, timeouts and bodies that are
    not a JSON model list.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _coerce_int(value: Any) -> int | None:
    """Coerce an upstream numeric field, returning None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


class Architecture(BaseModel):
    """Architecture descriptor. Unknown upstream keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    modality: str | None = None
    input_modalities: list[str] | None = None
    output_modalities: list[str] | None = None

    @field_validator("modality", mode="before")
    @classmethod
    def _modality_is_string(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("input_modalities", "output_modalities", mode="before")
    @classmethod
    def _string_list(cls, v: Any) -> list[str] | None:
        if not isinstance(v, list):
            return None
        return [item for item in v if isinstance(item, str)]


class Pricing(BaseModel):
    """Per-token pricing as decimal strings. Unknown upstream keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    prompt: str | None = None
    completion: str | None = None

    @field_validator("prompt", "completion", mode="before")
    @classmethod
    def _as_decimal_string(cls, v: Any) -> str | None:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return str(v)
        return v if isinstance(v, str) else None


class ModelRecord(BaseModel):
    """A single entry of the upstream catalog.

    Only ``id`` is required. Every other field is optional and falls back to
    None (or an empty list) when the upstream value is missing or unusable.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    name: str | None = None
    description: str | None = None
    context_length: int | None = None
    architecture: Architecture | None = None
    pricing: Pricing | None = None
    supported_parameters: list[str] = Field(default_factory=list)
    created: int | None = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def _optional_string(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("context_length", "created", mode="before")
    @classmethod
    def _optional_int(cls, v: Any) -> int | None:
        return _coerce_int(v)

    @field_validator("architecture", "pricing", mode="before")
    @classmethod
    def _optional_object(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @field_validator("supported_parameters", mode="before")
    @classmethod
    def _parameter_list(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, str)]

    @property
    def provider(self) -> str:
        return self.id.split("/", 1)[0]

    @property
    def modality(self) -> str:
        if self.architecture and self.architecture.modality:
            return self.architecture.modality
        return DEFAULT_MODALITY

    @property
    def context_tokens(self) -> int:
        return self.context_length or 0


def parse_catalog(payload: Any) -> list[ModelRecord]:
    """Validate an upstream payload into model records.

    Accepts either a bare list or an object with a ``data`` list. Malformed
    entries are dropped and counted in a warning.

    Raises:
        UpstreamFetchError: If the payload has neither shape.
    """
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        entries = payload["data"]
    elif isinstance(payload, list):
        entries = payload
    else:
        raise UpstreamFetchError("Catalog payload is not a model list")

    records: list[ModelRecord] = []
    quarantined = 0
    for entry in entries:
        if not isinstance(entry, dict):
            quarantined += 1
            continue
        try:
            records.append(ModelRecord.model_validate(entry))
        except ValidationError as e:
            quarantined += 1
            logger.debug("Quarantined catalog entry %r: %s", entry.get("id"), e)

    if quarantined:
        logger.warning(
            "Quarantined %d malformed catalog entries (kept %d)",
            quarantined,
            len(records),
        )
    return records


class CatalogSource(Protocol):
    """Protocol for upstream catalog adapters."""

    async def fetch_models(self) -> list[ModelRecord]:
        """Return the full upstream catalog in upstream order.

        Raises:
            UpstreamFetchError: If the catalog cannot be fetched or parsed.
        """
        ...
