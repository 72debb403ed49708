"""Diagnostic model: structured findings about analyzed IDL."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """Severity level for a diagnostic message."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding about an analyzed specification.

    Attributes:
        rule: Identifier for the analyzer step or check that produced it.
        severity: How serious the issue is.
        message: Human-readable description of the problem.
        name: The IDL name involved, if applicable.
        fix: Suggested remediation, if available.
    """

    rule: str
    severity: Severity
    message: str
    name: str | None = None
    fix: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def to_dict(self) -> dict[str, str]:
        data = {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.name:
            data["name"] = self.name
        if self.fix:
            data["fix"] = self.fix
        return data

    def __str__(self) -> str:
        location = f" [name={self.name}]" if self.name else ""
        return f"{self.severity.value}{location}: {self.message}"
