from __future__ import annotations

from enum import StrEnum


class ThreadKind(StrEnum):
    PRIVATE = "private"
    GROUP = "group"
