from dataclasses import dataclass, field
from typing import Dict, List, Set

# wire name -> attribute name
WIRE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
}
REQUIRED_FIELDS = ("firstName", "lastName", "email", "phone")
VERIFIED_FIELDS = ("email", "phone")

INVALID_MESSAGES = {
    "email": "Invalid email address",
    "phone": "Invalid phone number",
}


@dataclass
class FormState:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    def get(self, name: str) -> str:
        return getattr(self, WIRE_FIELDS[name])

    def set(self, name: str, value: str) -> None:
        if name not in WIRE_FIELDS:
            raise KeyError(name)
        setattr(self, WIRE_FIELDS[name], "" if value is None else str(value))

    def missing(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not self.get(name).strip()]

    def reset(self) -> None:
        for attr in WIRE_FIELDS.values():
            setattr(self, attr, "")

    def to_payload(self) -> Dict[str, str]:
        return {name: self.get(name) for name in WIRE_FIELDS}


@dataclass
class ValidationState:
    """Field -> error message. Empty string means no known error."""
    errors: Dict[str, str] = field(default_factory=lambda: {f: "" for f in VERIFIED_FIELDS})
    # fields that have had at least one valid/invalid answer
    determined: Set[str] = field(default_factory=set)

    def mark_valid(self, name: str) -> None:
        self.errors[name] = ""
        self.determined.add(name)

    def mark_invalid(self, name: str, message: str) -> None:
        self.errors[name] = message
        self.determined.add(name)

    def forget(self, name: str) -> None:
        """The value changed: the old verdict no longer counts, an old error still shows."""
        self.determined.discard(name)

    def reset(self) -> None:
        self.errors = {f: "" for f in VERIFIED_FIELDS}
        self.determined.clear()

    def invalid_fields(self) -> List[str]:
        return [name for name, msg in self.errors.items() if msg]

    def is_determined(self, name: str) -> bool:
        return name in self.determined

    def snapshot(self) -> Dict[str, str]:
        return dict(self.errors)
