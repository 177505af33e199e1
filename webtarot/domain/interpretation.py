"""Interpretation lifecycle: Pending, then Done or Failed."""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, NoReturn, Optional, Union
from uuid import UUID

from webtarot.domain.reading import Reading, utcnow
from webtarot.i18n import translate
from webtarot.models.enums import InterpretationStatus


class InvalidTransition(Exception):
    """Raised when a terminal interpretation is asked to change state."""


@dataclass(frozen=True)
class _InterpretationBase:
    reading: Reading

    status = InterpretationStatus.PENDING

    @property
    def id(self) -> UUID:
        return self.reading.id

    @property
    def is_terminal(self) -> bool:
        return self.status != InterpretationStatus.PENDING

    def with_owner(self, user_id: UUID) -> "Interpretation":
        """Same state with the reading's owner replaced; nothing else changes."""
        return replace(self, reading=self.reading.with_owner(user_id))

    def to_result(self) -> Dict[str, Any]:
        """Client-facing lookup result."""
        raise NotImplementedError

    def to_tagged_dict(self) -> Dict[str, Any]:
        """Externally tagged form used by the history listing."""
        raise NotImplementedError


@dataclass(frozen=True)
class Pending(_InterpretationBase):
    """Waiting for the external backend."""

    status = InterpretationStatus.PENDING

    def complete(self, text: str, completed_at: Optional[datetime] = None) -> "Done":
        return Done(self.reading, text, completed_at or utcnow())

    def fail(self, error: str) -> "Failed":
        return Failed(self.reading, error)

    def to_result(self) -> Dict[str, Any]:
        return {
            "done": False,
            "error": "",
            "interpretation": "",
            "reading": self.reading.to_dict(),
            "interpretationDoneAt": None,
        }

    def to_tagged_dict(self) -> Dict[str, Any]:
        return {"Pending": self.reading.to_dict()}


@dataclass(frozen=True)
class Done(_InterpretationBase):
    """Backend returned an interpretation text."""

    text: str
    completed_at: datetime

    status = InterpretationStatus.DONE

    def complete(self, text: str, completed_at: Optional[datetime] = None) -> NoReturn:
        raise InvalidTransition(f"Interpretation {self.id} is already done")

    def fail(self, error: str) -> NoReturn:
        raise InvalidTransition(f"Interpretation {self.id} is already done")

    def to_result(self) -> Dict[str, Any]:
        return {
            "done": True,
            "error": "",
            "interpretation": self.text,
            "reading": self.reading.to_dict(),
            "interpretationDoneAt": self.completed_at.isoformat(),
        }

    def to_tagged_dict(self) -> Dict[str, Any]:
        return {
            "Done": [
                self.reading.to_dict(),
                self.text,
                self.completed_at.isoformat(),
            ]
        }


@dataclass(frozen=True)
class Failed(_InterpretationBase):
    """Backend call failed; ``error`` is already localized."""

    error: str

    status = InterpretationStatus.FAILED

    def complete(self, text: str, completed_at: Optional[datetime] = None) -> NoReturn:
        raise InvalidTransition(f"Interpretation {self.id} has failed")

    def fail(self, error: str) -> NoReturn:
        raise InvalidTransition(f"Interpretation {self.id} has failed")

    def to_result(self) -> Dict[str, Any]:
        return {
            "done": True,
            "error": self.error,
            "interpretation": "",
            "reading": self.reading.to_dict(),
            "interpretationDoneAt": None,
        }

    def to_tagged_dict(self) -> Dict[str, Any]:
        return {"Failed": [self.reading.to_dict(), self.error]}


Interpretation = Union[Pending, Done, Failed]


def not_found_result(locale: str) -> Dict[str, Any]:
    """Lookup result for an id with no stored reading."""
    return {
        "done": False,
        "error": translate("interpretation.not_found", locale),
        "interpretation": "",
        "reading": None,
        "interpretationDoneAt": None,
    }
