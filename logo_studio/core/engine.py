"""Studio controller: per-mode working state and the generation state machine.

Architectural role:
    Sits between the interactive front end (`logo_studio.api.cli`) and the
    relay client. It owns two independent `ModeSession` records, one per mode,
    plus the session history.

State machine (per mode session):
    IDLE/SUCCESS/ERROR --generate(valid)--> LOADING
    LOADING --relay ok--> SUCCESS (history appended)
    LOADING --relay fails--> ERROR (message from the failure)
    generate(invalid) --> ERROR directly, no network call
    generate() while LOADING --> no-op
    switch_mode() returns a settled session being left to IDLE; its images,
    prompt, result and error are kept.

Concurrency:
    The relay client is blocking; calls run in a worker thread via
    `asyncio.to_thread` so the event loop stays responsive. The LOADING guard
    allows one outstanding request per mode session. There is no cancellation.

Failure handling:
    Every failure ends in ERROR with a human-readable message. Unexpected
    exceptions are logged and replaced by a generic message; they never
    propagate out of `generate`.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

from logo_studio.core.errors import InputValidationError, StudioError
from logo_studio.core.history import GenerationHistory
from logo_studio.core.types import (
    MAX_REFERENCE_IMAGES,
    GenerationRequest,
    GenerationResult,
    HistoryEntry,
    Mode,
    ModeSession,
    Status,
)
from logo_studio.core.validation import validate_request
from logo_studio.image.download import save_image
from logo_studio.image.encoder import encode_image_files


logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "The creative engine hit an unexpected obstacle."


class RelayProtocol(Protocol):
    """Minimal blocking interface required from a relay client."""

    def generate(self, request: GenerationRequest) -> str:
        """Return the generated image data URI or raise a `StudioError`."""
        ...


class LogoStudio:
    """Client state controller for the two generation modes."""

    def __init__(
        self,
        relay: RelayProtocol,
        history: Optional[GenerationHistory] = None,
        clock: Callable[[], float] = time.time,
        mode: Mode = Mode.MODERNIZE,
    ):
        self.relay = relay
        self.history = history if history is not None else GenerationHistory()
        self.mode = Mode(mode)
        self.sessions = {m: ModeSession() for m in Mode}
        self._clock = clock

    @property
    def active(self) -> ModeSession:
        return self.sessions[self.mode]

    @property
    def status(self) -> Status:
        return self.active.status

    # -----------------------------------------------------
    # Mode and input editing
    # -----------------------------------------------------

    def switch_mode(self, mode: Mode) -> None:
        leaving = self.active
        if leaving.status in (Status.SUCCESS, Status.ERROR):
            leaving.status = Status.IDLE
        self.mode = Mode(mode)

    def set_prompt(self, text: str) -> None:
        self.active.prompt = text
        self.active.error = None

    def set_images(self, images: Iterable[str]) -> None:
        self.active.images = list(images)[:MAX_REFERENCE_IMAGES]
        self.active.error = None

    def add_image_files(self, paths: Iterable[str]) -> int:
        """Encode and attach image files; returns how many were added.

        Unreadable or non-image files are skipped, and files beyond the
        reference-image cap are dropped.
        """
        session = self.active
        room = MAX_REFERENCE_IMAGES - len(session.images)
        added = encode_image_files(paths)[:max(0, room)]
        session.images.extend(added)
        session.error = None
        return len(added)

    def remove_image(self, index: int) -> None:
        del self.active.images[index]
        self.active.error = None

    def clear_images(self) -> None:
        self.active.images = []
        self.active.error = None

    # -----------------------------------------------------
    # Generation
    # -----------------------------------------------------

    async def generate(self) -> Optional[GenerationResult]:
        """Run one generation attempt for the active mode.

        Returns:
            The new `GenerationResult`, or `None` when the attempt was ignored
            (already loading) or ended in ERROR.
        """
        mode = self.mode
        session = self.sessions[mode]

        if session.status is Status.LOADING:
            logger.debug("Generation already in progress for %s; ignoring", mode.value)
            return None

        request = GenerationRequest(
            mode=mode,
            prompt_text=session.prompt,
            reference_images=tuple(session.images),
        )

        try:
            validate_request(request)
        except InputValidationError as e:
            session.error = e.message
            session.status = Status.ERROR
            return None

        session.status = Status.LOADING
        session.error = None

        try:
            image = await asyncio.to_thread(self.relay.generate, request)
        except StudioError as e:
            logger.warning("Generation failed [%s]: %s", e.code, e.message)
            session.error = e.message
            session.status = Status.ERROR
            return None
        except Exception:
            logger.exception("Generation failed unexpectedly")
            session.error = UNEXPECTED_ERROR_MESSAGE
            session.status = Status.ERROR
            return None

        result = GenerationResult(
            image_data=image,
            source_mode=mode,
            prompt_text=request.prompt_text,
            created_at=self._clock(),
        )
        session.result = result
        session.status = Status.SUCCESS
        self.history.append(HistoryEntry(result=result, reference_images=request.reference_images))
        return result

    def download(self, directory: str = ".") -> Path:
        """Save the active mode's current result under `directory`."""
        result = self.active.result
        if result is None:
            raise InputValidationError("There is no generated logo to download yet.")
        return save_image(result.image_data, directory, result.source_mode, result.created_at)
