"""
ActivityResolver - resolves the most recent activity timestamp of a lead.

The resolver is a pure read over a set of registered activity providers.
Adding a new activity-bearing entity means registering another provider;
the resolution logic itself never changes.
"""
from datetime import datetime, UTC
from typing import Iterable, Optional

from leadwatch.repositories.activity_repo import ActivityProvider


def as_utc(value: datetime) -> datetime:
    """Interpret naive timestamps (SQLite drops tzinfo) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours from ``earlier`` to ``later``."""
    return (as_utc(later) - as_utc(earlier)).total_seconds() / 3600


class ActivityResolver:
    """Max-of-maxima over all registered activity providers."""

    def __init__(self, providers: Iterable[ActivityProvider]):
        self.providers: list[ActivityProvider] = list(providers)

    def register(self, provider: ActivityProvider) -> None:
        self.providers.append(provider)

    async def resolve_last_activity(self, lead_id: int) -> Optional[datetime]:
        """
        Return the newest activity timestamp for ``lead_id``.

        Returns None when no provider has any record for the lead; callers
        must treat that as "cannot evaluate", not as "infinitely inactive".
        The lead's existence is not checked.
        """
        latest: Optional[datetime] = None
        for provider in self.providers:
            found = await provider.latest_timestamp_for_lead(lead_id)
            if found is None:
                continue
            found = as_utc(found)
            if latest is None or found > latest:
                latest = found
        return latest

    async def hours_inactive(self, lead_id: int, now: datetime) -> Optional[float]:
        """Hours since the last activity, or None if it cannot be resolved."""
        last_activity = await self.resolve_last_activity(lead_id)
        if last_activity is None:
            return None
        return hours_between(last_activity, now)
