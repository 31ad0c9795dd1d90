from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


class SLCSPError(Exception):
    """Base class for errors that stop a run."""


@dataclass(frozen=True)
class RowError:
    line: int       # file line when known, else 1-based row number
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class LoadError(SLCSPError):
    """An input table could not be read or has rows that fail to parse."""

    def __init__(self, source: str, errors: List[RowError] | None = None, reason: str | None = None):
        self.source = source
        self.errors = list(errors or [])
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.reason:
            return f"{self.source}: {self.reason}"
        shown = "; ".join(str(e) for e in self.errors[:5])
        more = f" (+{len(self.errors) - 5} more)" if len(self.errors) > 5 else ""
        return f"{self.source}: {len(self.errors)} bad row(s): {shown}{more}"


class OutputError(SLCSPError):
    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"could not write {path}: {cause}")


class StoreError(SLCSPError):
    """The scratch database could not be created or queried."""
