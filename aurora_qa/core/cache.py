"""
In-memory message cache with single-flight population.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence, Tuple

from aurora_qa.exceptions import ConcurrentFetchError
from aurora_qa.schemas import MessageItem

logger = logging.getLogger(__name__)


def filter_by_user_name(messages: Sequence[MessageItem], name: str) -> list:
    """Case-insensitive substring match against user_name."""
    needle = (name or "").strip().lower()
    return [m for m in messages if needle in m.user_name.lower()]


def filter_by_text(messages: Sequence[MessageItem], query: str) -> list:
    """Case-insensitive substring match against the message body."""
    needle = (query or "").strip().lower()
    return [m for m in messages if needle in m.message.lower()]


class MessageCache:
    """
    Process-wide holder of the fetched message set.

    The snapshot is a tuple that is only ever swapped whole, so readers see
    either the previous set or the new one. Population is guarded by
    ``fetch_in_progress``: a second population attempt while one is running
    fails with ConcurrentFetchError instead of waiting.
    """

    def __init__(self, fetcher):
        self.fetcher = fetcher
        self.messages: Tuple[MessageItem, ...] = ()
        self.last_populated_at: Optional[datetime] = None
        self.last_fetch_partial: bool = False
        self.fetch_in_progress: bool = False

    def is_populated(self) -> bool:
        return len(self.messages) > 0

    def age(self) -> Optional[timedelta]:
        if self.last_populated_at is None:
            return None
        return datetime.now(timezone.utc) - self.last_populated_at

    def clear(self) -> None:
        logger.info(f"[Cache] Clearing {len(self.messages)} cached messages")
        self.messages = ()
        self.last_populated_at = None
        self.last_fetch_partial = False

    async def get_all(self) -> Tuple[MessageItem, ...]:
        """Return the cached messages, populating whenever the cache is empty."""
        if self.is_populated():
            return self.messages
        return await self.populate()

    async def populate(self) -> Tuple[MessageItem, ...]:
        """
        Run one fetch and replace the snapshot with its result.

        Raises:
            ConcurrentFetchError: If a population is already running
            FetchError: If the fetch failed fatally; the prior snapshot is kept
        """
        # No await between the check and the set
        if self.fetch_in_progress:
            logger.warning("[Cache] Population requested while another is in flight")
            raise ConcurrentFetchError()
        self.fetch_in_progress = True

        try:
            logger.info("[Cache] Populating message cache...")
            result = await self.fetcher.fetch_all()

            self.messages = tuple(result.messages)
            self.last_populated_at = datetime.now(timezone.utc)
            self.last_fetch_partial = result.partial

            if result.partial:
                logger.warning(
                    f"[Cache] Partial population: {len(self.messages)} messages "
                    f"(stopped early: {result.stop_reason})"
                )
            else:
                logger.info(f"[Cache] Populated with {len(self.messages)} messages")
            return self.messages
        finally:
            self.fetch_in_progress = False

    # ------------------------------------------------------------
    # Read views (never block, always the current snapshot)
    # ------------------------------------------------------------

    def by_user_name(self, name: str) -> list:
        return filter_by_user_name(self.messages, name)

    def by_user_id(self, user_id: str) -> list:
        return [m for m in self.messages if m.user_id == user_id]

    def search(self, query: str) -> list:
        return filter_by_text(self.messages, query)

    def stats(self) -> dict:
        age = self.age()
        return {
            "messageCount": len(self.messages),
            "isPopulated": self.is_populated(),
            "lastFetched": self.last_populated_at,
            "ageMs": int(age.total_seconds() * 1000) if age is not None else None,
        }
