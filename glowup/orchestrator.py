"""Per-artifact generation state machine.

Each artifact kind moves ``idle -> pending -> succeeded | failed`` and can be
reset to ``idle`` from any state. A kind has at most one pending request; a
second start while pending is rejected, not queued. Every start takes a new
request token and a response is only applied while its token is current, so
a slow response cannot overwrite a reset or a newer request.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from .credentials import CredentialStore
from .errors import GenerationError, GenerationFailed, GenerationInFlight, Unauthorized
from .llm import Invoker, invoke
from .prompts import build_prompt
from .resolver import Payload, advisory_issues, resolve
from .schemas import (
    ArtifactKind,
    GenerationErrorDetail,
    GenerationResult,
    GenerationStatus,
    Profile,
)

logger = structlog.get_logger(__name__)

MISSING_PROBLEM_MESSAGE = "Please complete your startup profile with a problem statement first"


@dataclass
class _Slot:
    kind: ArtifactKind
    status: GenerationStatus = GenerationStatus.IDLE
    payload: Optional[Payload] = None
    error: Optional[GenerationError] = None
    token: int = 0
    advisories: List[str] = field(default_factory=list)


def error_detail(error: GenerationError) -> GenerationErrorDetail:
    """Serialize a generation error for the API."""

    return GenerationErrorDetail(
        code=error.code.value,
        message=error.message,
        status_code=getattr(error, "status_code", None),
        detail=getattr(error, "body", None) or None,
    )


class GenerationOrchestrator:
    """Coordinate prompt building, model calls and parsing per artifact kind."""

    def __init__(self, credentials: CredentialStore, *, invoker: Invoker | None = None) -> None:
        self._credentials = credentials
        self._invoke: Invoker = invoker or invoke
        self._slots: Dict[ArtifactKind, _Slot] = {kind: _Slot(kind=kind) for kind in ArtifactKind}
        self._tokens = itertools.count(1)

    # -- queries ------------------------------------------------------------

    def status(self, kind: ArtifactKind) -> GenerationStatus:
        return self._slots[kind].status

    def is_in_flight(self, kind: ArtifactKind) -> bool:
        return self._slots[kind].status is GenerationStatus.PENDING

    def result(self, kind: ArtifactKind) -> GenerationResult:
        slot = self._slots[kind]
        return GenerationResult(
            kind=kind,
            status=slot.status,
            payload=slot.payload,
            error=error_detail(slot.error) if slot.error else None,
            request_id=slot.token,
        )

    def results(self) -> Dict[str, GenerationResult]:
        return {kind.value: self.result(kind) for kind in ArtifactKind}

    def payload(self, kind: ArtifactKind) -> Optional[Payload]:
        return self._slots[kind].payload

    def advisories(self, kind: ArtifactKind) -> List[str]:
        return list(self._slots[kind].advisories)

    # -- transitions ----------------------------------------------------------

    def reset(self, kind: ArtifactKind) -> GenerationResult:
        """Return *kind* to idle and drop its payload, error and pending token."""

        slot = self._slots[kind]
        if slot.status is GenerationStatus.PENDING:
            logger.info("generation_reset_while_pending", kind=kind.value, request_id=slot.token)
        self._slots[kind] = _Slot(kind=kind)
        return self.result(kind)

    def start(
        self,
        kind: ArtifactKind,
        profile: Profile,
        *,
        problem_statement: str | None = None,
    ) -> asyncio.Task[GenerationResult]:
        """Begin a generation in the background and return its task.

        Must be called from a running event loop. Raises
        :class:`GenerationInFlight` when *kind* is already pending.
        """

        token = self._begin(kind)
        return asyncio.create_task(self._complete(kind, token, profile, problem_statement))

    async def run(
        self,
        kind: ArtifactKind,
        profile: Profile,
        *,
        problem_statement: str | None = None,
    ) -> GenerationResult:
        """Generate *kind* and return the resulting state."""

        token = self._begin(kind)
        return await self._complete(kind, token, profile, problem_statement)

    def _begin(self, kind: ArtifactKind) -> int:
        slot = self._slots[kind]
        if slot.status is GenerationStatus.PENDING:
            raise GenerationInFlight(kind.value)
        token = next(self._tokens)
        self._slots[kind] = _Slot(kind=kind, status=GenerationStatus.PENDING, token=token)
        logger.info("generation_started", kind=kind.value, request_id=token)
        return token

    async def _complete(
        self,
        kind: ArtifactKind,
        token: int,
        profile: Profile,
        problem_statement: str | None,
    ) -> GenerationResult:
        log = logger.bind(kind=kind.value, request_id=token)
        payload: Optional[Payload] = None
        error: Optional[GenerationError] = None
        try:
            payload = await self._generate(kind, profile, problem_statement)
        except GenerationError as exc:
            error = exc
        except asyncio.CancelledError:
            if self._is_current(kind, token):
                self._slots[kind] = _Slot(kind=kind)
            raise
        except Exception as exc:
            log.exception("generation_crashed")
            error = GenerationFailed(str(exc) or type(exc).__name__)

        if not self._is_current(kind, token):
            log.info("stale_generation_discarded")
            return self.result(kind)

        slot = self._slots[kind]
        if error is not None:
            slot.status = GenerationStatus.FAILED
            slot.error = error
            log.warning("generation_failed", error_code=error.code.value, error=error.message)
            if isinstance(error, Unauthorized):
                self._credentials.request_reentry()
        else:
            slot.status = GenerationStatus.SUCCEEDED
            slot.payload = payload
            slot.advisories = advisory_issues(payload)
            if slot.advisories:
                log.warning("advisory_issues", issues=slot.advisories)
            log.info("generation_succeeded")
        return self.result(kind)

    def _is_current(self, kind: ArtifactKind, token: int) -> bool:
        slot = self._slots[kind]
        return slot.status is GenerationStatus.PENDING and slot.token == token

    async def _generate(self, kind: ArtifactKind, profile: Profile, problem_statement: str | None) -> Payload:
        has_problem = bool((problem_statement or "").strip() or profile.problem.strip())
        if kind is ArtifactKind.MARKET_RESEARCH and not has_problem:
            raise GenerationFailed(MISSING_PROBLEM_MESSAGE)

        prompt = build_prompt(kind, profile, problem_statement)
        credential = self._credentials.get()
        raw_text = await self._invoke(prompt.system_prompt, prompt.user_prompt, credential, prompt.max_tokens)
        return resolve(raw_text, kind)
