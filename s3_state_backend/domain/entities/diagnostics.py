"""Diagnostics collected while validating and applying configuration."""
from enum import Enum
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel

from s3_state_backend.infra.common.errors import ConfigError


class Severity(str, Enum):
    """Diagnostic severity."""
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """A single user-facing problem report."""
    severity: Severity
    summary: str
    detail: str = ""
    path: tuple[str | int, ...] | None = None
    """Attribute path the diagnostic points at; None for whole-body or sourceless."""

    @property
    def attribute(self) -> str:
        """Dotted attribute path, or an empty string."""
        return path_string(self.path or ())

    def __str__(self) -> str:
        prefix = "Error" if self.severity is Severity.ERROR else "Warning"
        text = f"{prefix}: {self.summary}"
        if self.attribute:
            text += f"\n\n  on attribute {self.attribute!r}"
        if self.detail:
            text += f"\n\n{self.detail}"
        return text


def path_string(path: Iterable[str | int]) -> str:
    """Render an attribute path as "a.b[0].c"."""
    out = ""
    for step in path:
        if isinstance(step, int):
            out += f"[{step}]"
        elif out:
            out += f".{step}"
        else:
            out = step
    return out


def attribute_error(summary: str, detail: str, *path: str | int) -> Diagnostic:
    return Diagnostic(severity=Severity.ERROR, summary=summary, detail=detail, path=path)


def attribute_warning(summary: str, detail: str, *path: str | int) -> Diagnostic:
    return Diagnostic(severity=Severity.WARNING, summary=summary, detail=detail, path=path)


def sourceless(severity: Severity, summary: str, detail: str = "") -> Diagnostic:
    return Diagnostic(severity=severity, summary=summary, detail=detail)


class Diagnostics:
    """Ordered collection of diagnostics, appended to as validation proceeds."""

    def __init__(self, items: Optional[Iterable[Diagnostic]] = None):
        self._items: list[Diagnostic] = list(items or [])

    def append(self, diagnostic: Optional[Diagnostic]) -> "Diagnostics":
        if diagnostic is not None:
            self._items.append(diagnostic)
        return self

    def extend(self, diagnostics: Iterable[Diagnostic]) -> "Diagnostics":
        for diagnostic in diagnostics:
            self.append(diagnostic)
        return self

    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    def summaries(self) -> list[str]:
        return [d.summary for d in self._items]

    def raise_for_errors(self) -> None:
        """
        Raise ConfigError if any error diagnostic was collected.
        
        Raises:
            ConfigError: Carrying this collection
        """
        if self.has_errors():
            errors = self.errors
            message = errors[0].summary
            if len(errors) > 1:
                message += f" (and {len(errors) - 1} more errors)"
            raise ConfigError(message, diagnostics=self)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._items[index]

    def __repr__(self) -> str:
        return f"Diagnostics({self._items!r})"
