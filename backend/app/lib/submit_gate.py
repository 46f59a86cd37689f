import logging
from enum import Enum
from typing import Callable

from app.core.errors import FieldEmpty, FieldInvalid, FieldUnresolved, SendFailed
from app.lib import notifications as msg
from app.lib.form_state import VERIFIED_FIELDS, FormState, ValidationState
from app.lib.notifications import ToastQueue

log = logging.getLogger("uvicorn.error")


class SubmitResult(str, Enum):
    SENT = "sent"
    MISSING_FIELDS = "missing_fields"
    VALIDATION_ERRORS = "validation_errors"
    UNRESOLVED = "unresolved"
    SEND_FAILED = "send_failed"
    IN_PROGRESS = "in_progress"


class SubmitGate:
    """
    Decides whether the form may be sent and, if so, sends it once.

    Checks run in order: required fields, field errors, unresolved
    verifications. Unresolved means a validation is pending or the field was
    never determined (e.g. the service has been unreachable so far).
    """

    def __init__(self, mailer, toasts: ToastQueue):
        self.mailer = mailer
        self.toasts = toasts
        self.in_progress = False

    def check(self, form: FormState, validation: ValidationState, is_pending: Callable[[str], bool]) -> None:
        missing = form.missing()
        if missing:
            raise FieldEmpty(missing)

        invalid = validation.invalid_fields()
        if invalid:
            raise FieldInvalid(invalid)

        unresolved = [
            name for name in VERIFIED_FIELDS
            if is_pending(name) or not validation.is_determined(name)
        ]
        if unresolved:
            raise FieldUnresolved(unresolved)

    async def submit(
        self,
        form: FormState,
        validation: ValidationState,
        is_pending: Callable[[str], bool],
    ) -> SubmitResult:
        if self.in_progress:
            log.info("[contact] submit ignored: a send is already in progress")
            return SubmitResult.IN_PROGRESS

        try:
            self.check(form, validation, is_pending)
        except FieldEmpty:
            self.toasts.error(msg.MISSING_FIELDS)
            return SubmitResult.MISSING_FIELDS
        except FieldInvalid:
            self.toasts.error(msg.VALIDATION_ERRORS)
            return SubmitResult.VALIDATION_ERRORS
        except FieldUnresolved as exc:
            log.info(f"[contact] submit blocked, unresolved: {exc}")
            self.toasts.error(msg.VERIFICATION_PENDING)
            return SubmitResult.UNRESOLVED

        payload = form.to_payload()
        self.in_progress = True
        try:
            await self.mailer.send(payload)
        except SendFailed as exc:
            log.warning(f"[contact] send failed: {exc}")
            self.toasts.error(msg.SEND_FAILURE)
            return SubmitResult.SEND_FAILED
        finally:
            self.in_progress = False

        form.reset()
        validation.reset()
        self.toasts.success(msg.SEND_SUCCESS)
        return SubmitResult.SENT
