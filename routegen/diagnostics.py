"""Collect recoverable problems found while extracting a spec.

Every report is logged as it happens and kept, so callers can inspect
the full list after a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

log = structlog.get_logger(__name__)

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    event: str
    message: str
    path: str | None = None
    method: str | None = None
    status_code: str | None = None
    error: Exception | None = None

    def __str__(self) -> str:
        where = " ".join(p for p in (self.method, self.path) if p)
        if self.status_code:
            where = f"{where} [{self.status_code}]" if where else f"[{self.status_code}]"
        return f"{where}: {self.message}" if where else self.message


@dataclass
class Diagnostics:
    items: list[Diagnostic] = field(default_factory=list)

    def error(self, event: str, exc: Exception, **where: str | None) -> None:
        self._add(Diagnostic(ERROR, event, str(exc), error=exc, **where))

    def warning(self, event: str, message: str, **where: str | None) -> None:
        self._add(Diagnostic(WARNING, event, message, **where))

    def _add(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)
        context = {
            k: v for k, v in (
                ("path", diagnostic.path),
                ("method", diagnostic.method),
                ("status_code", diagnostic.status_code),
            ) if v is not None
        }
        emit = log.error if diagnostic.severity == ERROR else log.warning
        emit(diagnostic.event, reason=diagnostic.message, **context)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == WARNING]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
