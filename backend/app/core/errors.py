# app/core/errors.py
from typing import Iterable, List


class ContactFormError(Exception):
    """Base class for everything the contact pipeline raises."""


class _FieldsError(ContactFormError):
    def __init__(self, fields: Iterable[str]):
        self.fields: List[str] = list(fields)
        super().__init__(", ".join(self.fields))


class FieldEmpty(_FieldsError):
    pass


class FieldInvalid(_FieldsError):
    pass


class FieldUnresolved(_FieldsError):
    """A verified field is still pending or was never determined."""


class ServiceUnavailable(ContactFormError):
    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service}: {reason}")


class SendFailed(ContactFormError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
