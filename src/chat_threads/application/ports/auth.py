from __future__ import annotations

from typing import Protocol

from chat_threads.application.dto.principal import Principal


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Principal:
        """Return the caller for a bearer token or raise on an invalid one."""
        ...
