"""Diagnostic recording for pipeline stages.

Stages report what they repaired or degraded through a recorder that
both logs the event and keeps it, so the events can be attached to
the value the stage returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List

from .domain.models import Diagnostic, Severity

_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class DiagnosticRecorder:
    """Collects diagnostics for one stage of one request.

    Attributes:
        stage: Stage name stamped on every diagnostic
        logger: Logger the diagnostics are mirrored to
    """

    stage: str
    logger: logging.Logger
    _events: List[Diagnostic] = field(default_factory=list, repr=False)

    def record(self, severity: Severity, message: str, **details: Any) -> Diagnostic:
        diagnostic = Diagnostic(self.stage, severity, message, details)
        self._events.append(diagnostic)
        self.logger.log(_LEVELS[severity], message, extra={"stage": self.stage, **details})
        return diagnostic

    def debug(self, message: str, **details: Any) -> Diagnostic:
        return self.record(Severity.DEBUG, message, **details)

    def info(self, message: str, **details: Any) -> Diagnostic:
        return self.record(Severity.INFO, message, **details)

    def warning(self, message: str, **details: Any) -> Diagnostic:
        return self.record(Severity.WARNING, message, **details)

    def collected(self) -> tuple[Diagnostic, ...]:
        return tuple(self._events)
