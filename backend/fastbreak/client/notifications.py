"""
Transient user notifications (toasts).
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Notification:
    level: str  # success, error
    message: str


@dataclass
class Notifier:
    history: list[Notification] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.history.append(Notification("success", message))

    def error(self, message: str) -> None:
        self.history.append(Notification("error", message))

    @property
    def latest(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
