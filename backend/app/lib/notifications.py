import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

log = logging.getLogger("uvicorn.error")

MISSING_FIELDS = "Please fill in all fields."
VALIDATION_ERRORS = "Please fix validation errors before submitting."
VERIFICATION_PENDING = "Please wait for email and phone verification to finish."
SEND_SUCCESS = "Message sent successfully!"
SEND_FAILURE = "Failed to send message. Please try again."
SERVICE_UNAVAILABLE = {
    "email": "Email verification is currently unavailable.",
    "phone": "Phone verification is currently unavailable.",
}


@dataclass
class Toast:
    level: str  # success | error | warning
    message: str
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


class ToastQueue:
    """Per-session notification surface; the page pops toasts off it."""

    def __init__(self):
        self._items: List[Toast] = []

    def push(self, level: str, message: str, field: Optional[str] = None) -> Toast:
        toast = Toast(level=level, message=message, field=field)
        self._items.append(toast)
        log.info(f"[contact] toast {level}: {message}")
        return toast

    def success(self, message: str) -> Toast:
        return self.push("success", message)

    def error(self, message: str) -> Toast:
        return self.push("error", message)

    def warning(self, message: str, field: Optional[str] = None) -> Toast:
        return self.push("warning", message, field)

    def peek(self) -> List[Toast]:
        return list(self._items)

    def drain(self) -> List[Toast]:
        items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        return len(self._items)
