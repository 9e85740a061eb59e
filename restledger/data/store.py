"""Awaitable view of a SessionRepository for the report feed."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Optional

from .models import RangeResult, Session, SessionBounds
from .repository import SessionRepository


class AsyncSessionStore:
    """
    Runs repository reads in a worker thread so the event loop stays free.

    Exposes the calls the feed needs: query_range, next_session, get_bounds,
    subscribe.
    """

    def __init__(self, repo: SessionRepository) -> None:
        self.repo = repo

    async def query_range(self, start: datetime, end: datetime) -> RangeResult:
        return await asyncio.to_thread(self.repo.query_range, start, end)

    async def next_session(self, after: datetime) -> Optional[Session]:
        return await asyncio.to_thread(self.repo.next_session, after)

    async def get_bounds(self) -> SessionBounds:
        return await asyncio.to_thread(self.repo.get_bounds)

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self.repo.subscribe(callback)
