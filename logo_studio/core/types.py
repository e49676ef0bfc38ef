"""Data contracts for generation requests, results and per-mode sessions.

Architectural role:
    Defines the records passed between the studio controller, the relay
    client and the relay service. Results and history entries are frozen;
    only `ModeSession` is mutable, and it is owned by `engine.LogoStudio`.

Determinism:
    Purely structural. Timestamps are supplied by callers.
"""

from dataclasses import dataclass, field
from enum import Enum


MAX_REFERENCE_IMAGES = 5


class Mode(str, Enum):
    """Generation mode selected by the user."""

    MODERNIZE = "modernize"
    CREATE = "create"


class Status(str, Enum):
    """Lifecycle of a mode session's most recent generation attempt."""

    IDLE = "IDLE"
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


DEFAULT_LABELS = {
    Mode.MODERNIZE: "Brand Revival",
    Mode.CREATE: "Forge Identity",
}


@dataclass(frozen=True)
class GenerationRequest:
    """Input of one generation attempt.

    Attributes:
        mode: Selected mode.
        prompt_text: Free-form creative brief (may be empty).
        reference_images: Ordered data URIs supplied as model context.
    """

    mode: Mode
    prompt_text: str = ""
    reference_images: tuple[str, ...] = ()

    def to_payload(self) -> dict:
        """Return the relay wire body for this request."""
        return {
            "mode": self.mode.value,
            "userPrompt": self.prompt_text,
            "base64Images": list(self.reference_images),
        }


@dataclass(frozen=True)
class GenerationResult:
    """Image returned by a successful generation."""

    image_data: str
    source_mode: Mode
    prompt_text: str
    created_at: float


@dataclass(frozen=True)
class HistoryEntry:
    """A past result plus the reference images it was generated from."""

    result: GenerationResult
    reference_images: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return str(int(self.result.created_at * 1000))

    @property
    def label(self) -> str:
        prompt = self.result.prompt_text.strip()
        return prompt or DEFAULT_LABELS[self.result.source_mode]


@dataclass
class ModeSession:
    """Working state of one mode; switching modes never resets it."""

    images: list[str] = field(default_factory=list)
    prompt: str = ""
    result: GenerationResult | None = None
    error: str | None = None
    status: Status = Status.IDLE
