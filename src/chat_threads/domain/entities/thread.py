from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


def ordered_pair(user_a: int, user_b: int) -> tuple[int, int]:
    """Canonical storage order for an unordered participant pair."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


@dataclass(frozen=True, slots=True)
class Thread:
    id: UUID
    kind: str
    member_low_id: int
    member_high_id: int
    latest_activity_at: datetime | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    @property
    def participants(self) -> tuple[int, int]:
        return (self.member_low_id, self.member_high_id)

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.member_low_id, self.member_high_id)

    def other_participant(self, user_id: int) -> int:
        return self.member_high_id if user_id == self.member_low_id else self.member_low_id
