"""Error taxonomy for the inference and planning pipeline."""

from enum import StrEnum


class GatewayError(Exception):
    """Inference service call failed before any content came back."""

    retryable = False


class Unauthenticated(GatewayError):
    """Credential missing or rejected by the inference service."""


class InvalidRequest(GatewayError):
    """The service rejected the prompt or attachment."""


class RateLimited(GatewayError):
    retryable = True


class QuotaExceeded(GatewayError):
    retryable = True


class ServiceUnavailable(GatewayError):
    """Transport failure, timeout or server-side error."""

    retryable = True


class ExtractionError(Exception):
    """No parseable structured payload in the model text."""


class NoStructureFound(ExtractionError):
    pass


class MalformedSyntax(ExtractionError):
    pass


class PayloadValidationError(Exception):
    """A structured payload broke a schema rule.

    ``field_path`` points at the first offending field, e.g.
    ``days[2].meals[0].calories``; ``rule`` names the broken constraint.
    """

    def __init__(self, field_path: str, rule: str, message: str) -> None:
        super().__init__(f"{field_path or '<root>'}: {message} ({rule})")
        self.field_path = field_path
        self.rule = rule
        self.message = message


class AssemblyError(Exception):
    """Validated days cannot be arranged into a schedule."""


class IncompleteSchedule(AssemblyError):
    def __init__(
        self,
        day_count: int,
        missing: list[int],
        duplicated: list[int],
        extra: list[int] | None = None,
    ) -> None:
        extra = extra or []
        parts = []
        if missing:
            parts.append(f"missing days {missing}")
        if duplicated:
            parts.append(f"duplicated days {duplicated}")
        if extra:
            parts.append(f"days outside 1..{day_count} {extra}")
        super().__init__(
            f"Schedule for {day_count} days is incomplete: {', '.join(parts)}"
        )
        self.day_count = day_count
        self.missing = missing
        self.duplicated = duplicated
        self.extra = extra


class PipelineStage(StrEnum):
    REQUEST = "request"
    INFERENCE = "inference"
    EXTRACTION = "extraction"
    VALIDATION = "validation"
    ASSEMBLY = "assembly"


class PipelineError(Exception):
    """Single error surfaced by the orchestrator.

    The stage-specific error is chained as ``__cause__``.
    """

    def __init__(self, stage: PipelineStage, cause: str, attempts: int = 0) -> None:
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.cause = cause
        self.attempts = attempts
