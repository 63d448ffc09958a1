"""Geometry-pipeline exception taxonomy.

Every error raised by the projection layer, the registry and the batch
orchestrator derives from ``PipelineError``. The orchestrator reads the
``category`` of a failure to decide, per entity, whether to drop and
count it or to abort the batch:

- ``validation``: one entity's coordinates or ring are unusable.
- ``contract``: a persistence record has an unexpected shape.
- ``permanent``: the batch cannot run (unknown country, bad config).
- ``cancelled``: a newer request superseded the batch.

Nothing here talks to an external service, so no error is retryable.
``to_error_dict()`` gives the stable payload used in batch reports.
"""

from __future__ import annotations

from typing import ClassVar


class PipelineError(Exception):
    """Base exception for all geometry-pipeline errors.

    Subclasses set ``category``, ``default_stage`` and ``default_code``
    as class attributes; ``stage`` and ``code`` can still be overridden
    per instance.

    Attributes:
        message: Human-readable error description.
        stage: Where the error was raised (``"projection"``, ``"registry"``).
        code: Machine-readable error code (e.g. ``"OUT_OF_DOMAIN"``).
        correlation_id: Identifier of the request or batch.
    """

    category: ClassVar[str] = "permanent"
    retryable: ClassVar[bool] = False
    default_stage: ClassVar[str] = ""
    default_code: ClassVar[str] = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        correlation_id: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.correlation_id = correlation_id

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """One entity's positional data cannot be turned into a feature."""

    category = "validation"


class PermanentError(PipelineError):
    """The batch as a whole cannot be processed."""


class ContractError(PipelineError):
    """A record handed over by the persistence layer has drifted from its schema."""

    category = "contract"


class BatchCancelledError(PipelineError):
    """The batch was superseded or cancelled before it completed."""

    category = "cancelled"
    default_stage = "orchestrator"
    default_code = "BATCH_SUPERSEDED"


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------


class UnknownCountryError(PermanentError):
    """No projection parameters are registered for a country code.

    Attributes:
        country_code: The code that was looked up.
    """

    default_stage = "registry"
    default_code = "UNKNOWN_COUNTRY"

    def __init__(self, country_code: str, message: str = "", **kwargs: str) -> None:
        self.country_code = country_code
        super().__init__(
            message or f"No projection parameters registered for country {country_code!r}",
            **kwargs,
        )


class OutOfDomainError(ValidationError):
    """A coordinate lies outside the mathematical domain of the projection."""

    default_stage = "projection"
    default_code = "OUT_OF_DOMAIN"


class RingValidationError(ValidationError):
    """A vertex ring violates its ordering contract."""

    default_stage = "orchestrator"
    default_code = "INVALID_RING"


class EntityContractError(ContractError):
    """An entity record from the persistence layer has an unexpected shape."""

    default_stage = "ingest"
    default_code = "ENTITY_CONTRACT_VIOLATION"
