"""Report validator: analyzer diagnostics plus the report checks."""

from __future__ import annotations

import logging
from typing import Callable

from specfacts.model.diagnostic import Diagnostic
from specfacts.model.report import AnalyzerReport
from specfacts.validation.rules import ALL_RULES

logger = logging.getLogger(__name__)

RuleFunc = Callable[[AnalyzerReport], list[Diagnostic]]


class ValidationError(Exception):
    """Raised when a report has ERROR-severity diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        names = sorted({d.name for d in diagnostics if d.name})
        detail = "; ".join(str(d) for d in diagnostics)
        super().__init__(
            f"{len(diagnostics)} error(s) in IDL report"
            + (f" (names: {', '.join(names)})" if names else "")
            + f": {detail}"
        )


def validate(
    report: AnalyzerReport, extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Return the analyzer's own diagnostics followed by every check's findings."""
    diagnostics = list(report.diagnostics)
    for rule in [*ALL_RULES, *(extra_rules or [])]:
        found = rule(report)
        if found:
            logger.debug("%s: %d finding(s)", rule.__name__, len(found))
        diagnostics.extend(found)
    return diagnostics


def validate_or_raise(
    report: AnalyzerReport, extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Like :func:`validate`, raising :class:`ValidationError` on any ERROR."""
    diagnostics = validate(report, extra_rules=extra_rules)
    errors = [d for d in diagnostics if d.is_error]
    if errors:
        raise ValidationError(errors)
    return diagnostics
