import asyncio
from typing import Optional

from .errors import ProviderTimeoutError


class CancellationToken:
    """
    Explicit cancellation signal passed into every provider call.

    The token is settled either when the call completes or when the resolver's
    timeout fires. Providers may check it between suspension points, the
    resolver additionally cancels the provider task itself so that the
    underlying network operation is released.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def isCancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Cancel token (first reason wins)"""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def raiseIfCancelled(self) -> None:
        if self._event.is_set():
            raise ProviderTimeoutError(self._reason or "cancelled")

    async def wait(self) -> Optional[str]:
        """Wait until token is cancelled, returns cancellation reason"""
        await self._event.wait()
        return self._reason
