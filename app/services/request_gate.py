from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Awaitable, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)


class LatestRequestGate:
    """
    Newest-issued-wins guard for repeated requests from the same client.

    Every call gets a monotonically increasing token. Issuing a new token for a key
    cancels the work still running for the previous one, and a call whose token is
    no longer the latest returns None instead of its result or its error, whichever
    finishes first.
    """

    def __init__(self) -> None:
        self._tokens = itertools.count(1)
        self._latest: Dict[str, int] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

    def issue(self, key: str) -> int:
        token = next(self._tokens)
        self._latest[key] = token
        return token

    def is_latest(self, key: str, token: int) -> bool:
        return self._latest.get(key) == token

    def _release(self, key: str, token: int) -> None:
        if self._latest.get(key) == token:
            del self._latest[key]

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> Optional[T]:
        token = self.issue(key)

        previous = self._inflight.get(key)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.ensure_future(factory())
        self._inflight[key] = task
        try:
            result = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if (current is not None and current.cancelling()) or self.is_latest(key, token):
                # the caller itself went away
                self._release(key, token)
                raise
            log.debug("request %s for %s superseded", token, key)
            return None
        except Exception as e:
            if not self.is_latest(key, token):
                log.debug("dropping stale failure %s for %s: %s", token, key, e)
                return None
            self._release(key, token)
            raise
        finally:
            if self._inflight.get(key) is task:
                del self._inflight[key]

        if not self.is_latest(key, token):
            log.debug("dropping stale result %s for %s", token, key)
            return None
        self._release(key, token)
        return result
