from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ..timestamps import format_timestamp


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def ok(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "OK", detail).render()


def error(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ERROR", detail).render()


def enabled(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ENABLED", detail).render()


def disabled(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "DISABLED", detail).render()


def time_range(start: timedelta, end: timedelta) -> str:
    return f"{format_timestamp(start)} - {format_timestamp(end)}"
