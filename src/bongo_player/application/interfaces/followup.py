"""Port interface for delivering the outcome of a deferred request."""

from __future__ import annotations

from abc import ABC, abstractmethod


class FollowupChannel(ABC):
    """Continuation of an acknowledged request, used once the real work is done."""

    @abstractmethod
    async def send(self, content: str, *, ephemeral: bool = False) -> None:
        ...
