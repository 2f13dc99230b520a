from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Optional

from ..core.enums import Channel, NotificationKind


@dataclass(frozen=True)
class Notification:
    """Domain entity: an alert addressed to one employee.

    Created only by the dispatcher; afterwards only `read` changes.
    """

    notification_id: str
    employee_id: str
    kind: NotificationKind
    message: str
    created_at: datetime
    read: bool = False
    work_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "employee_id": self.employee_id,
            "kind": self.kind.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
            "read": self.read,
            "date": self.work_date.isoformat() if self.work_date else None,
        }


@dataclass(frozen=True)
class DispatchOptions:
    """How the dispatcher fans a notification out: store it, then which channels."""

    persist: bool = True
    channels: FrozenSet[Channel] = field(default_factory=frozenset)

    @classmethod
    def from_names(cls, names, *, persist: bool = True) -> "DispatchOptions":
        channels = set()
        for name in names or ():
            name = str(name).strip().lower()
            if name:
                channels.add(Channel(name))
        return cls(persist=persist, channels=frozenset(channels))
