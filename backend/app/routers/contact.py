import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field

from app.core.mailer import get_mailer
from app.core.settings import settings
from app.core.verifiers import get_email_verifier, get_phone_verifier
from app.lib.contact_session import ContactSession
from app.lib.submit_gate import SubmitResult

router = APIRouter(prefix="/api/contact", tags=["contact"])
log = logging.getLogger("uvicorn.error")

# in-process only; a restart forgets every open form
_sessions: Dict[str, ContactSession] = {}

_BLOCKED = {
    SubmitResult.MISSING_FIELDS: 422,
    SubmitResult.VALIDATION_ERRORS: 422,
    SubmitResult.UNRESOLVED: 422,
    SubmitResult.IN_PROGRESS: 409,
    SubmitResult.SEND_FAILED: 502,
}


class ContactFieldsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None


def build_session() -> ContactSession:
    return ContactSession(
        email_verifier=get_email_verifier(settings),
        phone_verifier=get_phone_verifier(settings),
        mailer=get_mailer(settings),
        debounce_seconds=settings.debounce_seconds,
    )


def _get_session(session_id: str) -> ContactSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Contact session not found")
    session.touch()
    return session


def evict_idle_sessions() -> int:
    ttl = settings.contact_session_ttl_seconds
    expired = [
        sid for sid, session in _sessions.items()
        if session.idle_for() > ttl and not session.gate.in_progress
    ]
    for sid in expired:
        _sessions.pop(sid).close()
    if expired:
        log.info(f"[contact] evicted {len(expired)} idle session(s)")
    return len(expired)


def _view(session: ContactSession) -> dict:
    out = session.snapshot()
    out["toasts"] = [t.to_dict() for t in session.toasts.drain()]
    return out


def close_all_sessions() -> None:
    for session in _sessions.values():
        session.close()
    _sessions.clear()


@router.post("/sessions", status_code=201)
async def create_session():
    evict_idle_sessions()
    try:
        session = build_session()
    except RuntimeError as exc:
        log.error(f"[contact] cannot build session: {exc}")
        raise HTTPException(status_code=503, detail="Contact form is not configured")
    _sessions[session.id] = session
    return _view(session)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    return _view(_get_session(session_id))


@router.patch("/sessions/{session_id}")
async def update_fields(session_id: str, payload: ContactFieldsIn):
    session = _get_session(session_id)
    for name, value in payload.model_dump(by_alias=True, exclude_unset=True).items():
        session.capture(name, value)
    return _view(session)


@router.post("/sessions/{session_id}/submit")
async def submit(session_id: str):
    session = _get_session(session_id)
    result = await session.submit()
    body = {"result": result.value, **_view(session)}
    if result in _BLOCKED:
        raise HTTPException(status_code=_BLOCKED[result], detail=body)
    return body


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str):
    session = _sessions.pop(session_id, None)
    if session is None:
        raise HTTPException(status_code=404, detail="Contact session not found")
    session.close()
    return Response(status_code=204)
