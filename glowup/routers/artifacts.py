"""Session and artifact endpoints for the GlowUp FastAPI backend."""

from __future__ import annotations

import asyncio
from datetime import date
from enum import Enum
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response

from ..artifacts import list_artifact_definitions, render_markdown
from ..content_calendar import build_calendar
from ..errors import ExportError, GenerationInFlight, IncompleteProfile
from ..export import export_filename, write_pdf
from ..memory import Session, SessionMemory
from ..schemas import (
    ArtifactDefinition,
    ArtifactKind,
    ArtifactResponse,
    CalendarRequest,
    ContentCalendar,
    CredentialRequest,
    CredentialStatus,
    GenerateRequest,
    GenerationStatus,
    SessionCreateRequest,
    SessionResponse,
    SlideCursor,
)


router = APIRouter(tags=["artifacts"])

MAX_EXPORT_IMAGE_BYTES = 20 * 1024 * 1024


class SlideAction(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"
    FIRST = "first"


def get_sessions(request: Request) -> SessionMemory:
    return request.app.state.sessions


def get_session(session_id: str, sessions: SessionMemory = Depends(get_sessions)) -> Session:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"No session found for id '{session_id}'.")
    return session


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        profile=session.profile,
        has_credential=session.credentials.has_credential,
        needs_credential_reentry=session.credentials.needs_reentry,
        results=session.orchestrator.results(),
    )


def _artifact_response(session: Session, kind: ArtifactKind) -> ArtifactResponse:
    orchestrator = session.orchestrator
    return ArtifactResponse(
        result=orchestrator.result(kind),
        markdown=render_markdown(orchestrator.payload(kind)),
        advisories=orchestrator.advisories(kind),
    )


def _slide_cursor(session: Session) -> SlideCursor:
    carousel = session.carousel
    return SlideCursor(index=carousel.index, total=carousel.total, slide=carousel.current)


def _credential_status(session: Session) -> CredentialStatus:
    return CredentialStatus(
        has_credential=session.credentials.has_credential,
        needs_credential_reentry=session.credentials.needs_reentry,
    )


@router.get("/health")
async def healthcheck() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}


@router.get("/artifacts", response_model=list[ArtifactDefinition])
async def list_artifacts() -> list[ArtifactDefinition]:
    """Expose artifact metadata to the UI."""

    return list_artifact_definitions()


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    payload: SessionCreateRequest,
    sessions: SessionMemory = Depends(get_sessions),
) -> SessionResponse:
    """Store the onboarding profile and open a session."""

    session = sessions.create(payload.profile, payload.credential)
    return _session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def fetch_session(session: Session = Depends(get_session)) -> SessionResponse:
    return _session_response(session)


@router.put("/sessions/{session_id}/credential", response_model=CredentialStatus)
async def set_credential(payload: CredentialRequest, session: Session = Depends(get_session)) -> CredentialStatus:
    """Store the API key used by the next generation."""

    session.credentials.set(payload.credential)
    return _credential_status(session)


@router.delete("/sessions/{session_id}/credential", response_model=CredentialStatus)
async def clear_credential(session: Session = Depends(get_session)) -> CredentialStatus:
    session.credentials.clear()
    return _credential_status(session)


@router.post("/sessions/{session_id}/artifacts/{kind}", response_model=ArtifactResponse)
async def generate_artifact(
    kind: ArtifactKind,
    payload: Optional[GenerateRequest] = Body(default=None),
    session: Session = Depends(get_session),
) -> ArtifactResponse:
    """Generate the requested artifact; failures come back as a failed result."""

    problem_statement = payload.problem_statement if payload else None
    try:
        result = await session.orchestrator.run(kind, session.profile, problem_statement=problem_statement)
    except GenerationInFlight as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    session.show_slides(result)
    return _artifact_response(session, kind)


@router.get("/sessions/{session_id}/artifacts/{kind}", response_model=ArtifactResponse)
async def fetch_artifact(kind: ArtifactKind, session: Session = Depends(get_session)) -> ArtifactResponse:
    return _artifact_response(session, kind)


@router.delete("/sessions/{session_id}/artifacts/{kind}", response_model=ArtifactResponse)
async def reset_artifact(kind: ArtifactKind, session: Session = Depends(get_session)) -> ArtifactResponse:
    """Return the artifact to idle, discarding any result or pending response."""

    session.orchestrator.reset(kind)
    if kind is ArtifactKind.PITCH_DECK:
        session.clear_slides()
    return _artifact_response(session, kind)


@router.get("/sessions/{session_id}/slides", response_model=SlideCursor)
async def current_slide(session: Session = Depends(get_session)) -> SlideCursor:
    return _slide_cursor(session)


@router.post("/sessions/{session_id}/slides/{action}", response_model=SlideCursor)
async def move_slide(action: SlideAction, session: Session = Depends(get_session)) -> SlideCursor:
    """Step through the pitch deck, wrapping around at both ends."""

    if action is SlideAction.NEXT:
        session.carousel.next()
    elif action is SlideAction.PREVIOUS:
        session.carousel.previous()
    else:
        session.carousel.go_to(0)
    return _slide_cursor(session)


@router.post("/sessions/{session_id}/calendar", response_model=ContentCalendar)
async def content_calendar(
    payload: Optional[CalendarRequest] = Body(default=None),
    session: Session = Depends(get_session),
) -> ContentCalendar:
    """Build next month's social content calendar from templates."""

    options = payload or CalendarRequest()
    try:
        return build_calendar(session.profile, today=options.today or date.today(), seed=options.seed)
    except IncompleteProfile as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


async def _read_image_body(request: Request) -> bytes:
    """Read the upload, stopping once it exceeds MAX_EXPORT_IMAGE_BYTES."""

    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > MAX_EXPORT_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="Report image is too large to export.")

    chunks = bytearray()
    async for chunk in request.stream():
        chunks.extend(chunk)
        if len(chunks) > MAX_EXPORT_IMAGE_BYTES:
            raise HTTPException(status_code=413, detail="Report image is too large to export.")
    return bytes(chunks)


@router.post("/sessions/{session_id}/exports/market-research")
async def export_market_research(request: Request, session: Session = Depends(get_session)) -> Response:
    """Paginate the rendered report image (request body) into a PDF download."""

    if session.orchestrator.status(ArtifactKind.MARKET_RESEARCH) is not GenerationStatus.SUCCEEDED:
        raise HTTPException(status_code=409, detail="Generate the market research report before exporting it.")

    image_bytes = await _read_image_body(request)
    if not image_bytes:
        raise HTTPException(status_code=422, detail="Request body must contain the rendered report image.")

    title = f"{session.profile.startup_name.strip() or 'Startup'} Market Analysis"
    try:
        pdf_bytes = await asyncio.to_thread(write_pdf, image_bytes, title=title)
    except ExportError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    filename = export_filename(session.profile.startup_name, ArtifactKind.MARKET_RESEARCH.label, date.today())
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
