"""
Launch countdown for the coming-soon page.

Mirrors the client-side timer: every tick recomputes whole days, hours,
minutes and seconds from the millisecond distance to the launch instant.
Once the distance goes negative the countdown is live for good.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .derived import parse_iso_datetime


MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

LIVE_MESSAGE = "We're Live!"


@dataclass(frozen=True)
class CountdownState:
    """Remaining time at one instant, or the live state."""

    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    live: bool = False

    def digits(self) -> dict[str, str]:
        """Two-digit display values keyed by element id."""
        return {
            "days": f"{self.days:02d}",
            "hours": f"{self.hours:02d}",
            "minutes": f"{self.minutes:02d}",
            "seconds": f"{self.seconds:02d}",
        }


LIVE = CountdownState(live=True)


def remaining(target: datetime, now: datetime) -> CountdownState:
    """Split the distance from now to target into display units."""
    distance = (target - now) // timedelta(milliseconds=1)
    if distance < 0:
        return LIVE
    return CountdownState(
        days=distance // MS_PER_DAY,
        hours=(distance % MS_PER_DAY) // MS_PER_HOUR,
        minutes=(distance % MS_PER_HOUR) // MS_PER_MINUTE,
        seconds=(distance % MS_PER_MINUTE) // MS_PER_SECOND,
    )


class Countdown:
    """Countdown to a launch instant that latches once it goes live."""

    def __init__(self, target: datetime) -> None:
        if target.tzinfo is None:
            target = target.replace(tzinfo=timezone.utc)
        self._target = target
        self._live = False

    @classmethod
    def from_launch_date(cls, launch_date: Optional[str]) -> Optional["Countdown"]:
        """Build a countdown from an ISO launch date; None if it does not parse."""
        target = parse_iso_datetime(launch_date)
        if target is None:
            return None
        return cls(target)

    @property
    def target(self) -> datetime:
        return self._target

    @property
    def target_ms(self) -> int:
        """Launch instant as milliseconds since the Unix epoch."""
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        return (self._target - epoch) // timedelta(milliseconds=1)

    @property
    def is_live(self) -> bool:
        return self._live

    def tick(self, now: Optional[datetime] = None) -> CountdownState:
        """Recompute the state at now; after going live it stays live."""
        if self._live:
            return LIVE
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        state = remaining(self._target, now)
        if state.live:
            self._live = True
        return state
