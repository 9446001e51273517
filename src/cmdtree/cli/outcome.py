"""Dispatch outcomes.

Every dispatch path returns an Outcome instead of exiting the process;
the CLI turns it into an exit code in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutcomeKind(Enum):
    """How a dispatch ended."""

    OK = "ok"
    VALIDATION_ERROR = "validation_error"
    EXECUTION_ERROR = "execution_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class Outcome:
    """Result of one dispatch."""

    kind: OutcomeKind
    message: str = ""

    @property
    def exit_code(self) -> int:
        return 0 if self.kind is OutcomeKind.OK else 1

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @classmethod
    def success(cls) -> Outcome:
        return cls(OutcomeKind.OK)

    @classmethod
    def validation_error(cls, message: str) -> Outcome:
        return cls(OutcomeKind.VALIDATION_ERROR, message)

    @classmethod
    def execution_error(cls, message: str) -> Outcome:
        return cls(OutcomeKind.EXECUTION_ERROR, message)

    @classmethod
    def parse_error(cls, message: str) -> Outcome:
        return cls(OutcomeKind.PARSE_ERROR, message)
