import logging
import time
import uuid
from typing import Any, Dict, Optional

from app.core.verifiers import VerificationOutcome
from app.lib import notifications as msg
from app.lib.debounce import DebouncedValidator
from app.lib.form_state import INVALID_MESSAGES, VERIFIED_FIELDS, FormState, ValidationState
from app.lib.notifications import ToastQueue
from app.lib.submit_gate import SubmitGate, SubmitResult

log = logging.getLogger("uvicorn.error")


class ContactSession:
    """
    One visitor's contact form: input capture, debounced remote validation
    of email/phone, and the submit gate. Must be used from a running event
    loop; all state is touched from that loop only.
    """

    def __init__(self, email_verifier, phone_verifier, mailer, debounce_seconds: float = 0.5):
        self.id = uuid.uuid4().hex
        self.form = FormState()
        self.validation = ValidationState()
        self.toasts = ToastQueue()
        self.validator = DebouncedValidator(
            {"email": email_verifier, "phone": phone_verifier},
            self._on_result,
            window=debounce_seconds,
        )
        self.gate = SubmitGate(mailer, self.toasts)
        self.last_seen = time.monotonic()

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def idle_for(self, now: Optional[float] = None) -> float:
        return (time.monotonic() if now is None else now) - self.last_seen

    def capture(self, name: str, value: Optional[str]) -> None:
        self.form.set(name, value)
        if name in VERIFIED_FIELDS:
            self.validation.forget(name)
            self.validator.schedule(name, self.form.get(name))

    def _on_result(self, field: str, value: str, outcome: VerificationOutcome) -> None:
        if outcome is VerificationOutcome.VALID:
            self.validation.mark_valid(field)
        elif outcome is VerificationOutcome.INVALID:
            self.validation.mark_invalid(field, INVALID_MESSAGES[field])
        else:
            # keep whatever we knew before; an undetermined field stays unresolved
            self.toasts.warning(msg.SERVICE_UNAVAILABLE[field], field=field)

    def pending(self) -> Dict[str, bool]:
        return {name: self.validator.is_pending(name) for name in VERIFIED_FIELDS}

    async def submit(self) -> SubmitResult:
        return await self.gate.submit(self.form, self.validation, self.validator.is_pending)

    async def wait_idle(self) -> None:
        await self.validator.wait_idle()

    def close(self) -> None:
        self.validator.cancel_all()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": self.id,
            "form": self.form.to_payload(),
            "errors": self.validation.snapshot(),
            "pending": self.pending(),
            "submitting": self.gate.in_progress,
        }
