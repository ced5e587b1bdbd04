"""Simple in-memory store for GlowUp sessions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict

from .carousel import Carousel
from .credentials import CredentialStore
from .llm import Invoker
from .orchestrator import GenerationOrchestrator
from .schemas import GenerationResult, PitchDeck, Profile, Slide


@dataclass
class Session:
    """Everything one founder's browser session owns."""

    session_id: str
    profile: Profile
    credentials: CredentialStore
    orchestrator: GenerationOrchestrator
    carousel: Carousel[Slide] = field(default_factory=Carousel)
    slides_request_id: int = 0

    def show_slides(self, result: GenerationResult) -> None:
        """Load a generated deck into the carousel once per request.

        A result that is already on display keeps the current position.
        """

        if not isinstance(result.payload, PitchDeck) or result.request_id == self.slides_request_id:
            return
        self.carousel.load(result.payload.slides)
        self.slides_request_id = result.request_id

    def clear_slides(self) -> None:
        self.carousel.load([])
        self.slides_request_id = 0


class SessionMemory:
    """Keep sessions keyed by id; the profile of a session never changes."""

    def __init__(self, invoker: Invoker | None = None, default_credential: str | None = None) -> None:
        self._store: Dict[str, Session] = {}
        self._invoker = invoker
        self._default_credential = default_credential

    def create(self, profile: Profile, credential: str | None = None) -> Session:
        """Store a new session for an onboarding submission."""

        credentials = CredentialStore(credential or self._default_credential)
        session = Session(
            session_id=uuid.uuid4().hex,
            profile=profile,
            credentials=credentials,
            orchestrator=GenerationOrchestrator(credentials, invoker=self._invoker),
        )
        self._store[session.session_id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        return self._store.get(session_id)

    def drop(self, session_id: str) -> None:
        self._store.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._store)
