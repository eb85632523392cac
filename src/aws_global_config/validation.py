"""Validation results surfaced to the administrative UI layer."""

from dataclasses import dataclass
from enum import Enum

from aws_global_config.exceptions import ValidationError


class Kind(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class FormValidation:
    kind: Kind
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "FormValidation":
        return cls(Kind.OK, message)

    @classmethod
    def warning(cls, message: str) -> "FormValidation":
        return cls(Kind.WARNING, message)

    @classmethod
    def error(cls, message: str) -> "FormValidation":
        return cls(Kind.ERROR, message)

    @property
    def is_ok(self) -> bool:
        return self.kind is not Kind.ERROR

    def raise_for_error(self) -> None:
        """Raise :class:`ValidationError` if this result is an error."""
        if self.kind is Kind.ERROR:
            raise ValidationError(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}
