"""
Longitude based local time alignment.

The weather provider returns the hourly series as relative offsets starting
at "now". To label each point with a wall-clock hour we approximate the
viewer's timezone from longitude: one hour per 15 degrees. This is a
deliberate approximation and will disagree with political timezones (all of
China uses UTC+8 although Kashgar sits at ~76E and gets +5 here), and
longitudes near the antimeridian yield +12 or -12.
"""

import datetime
from typing import List, Optional

from .safe_get import roundHalfUp

HOURS_PER_DAY = 24
DEGREES_PER_HOUR = 15


class TemporalAligner:
    """
    Converts provider-relative hour offsets into local wall-clock hours

    Example:
        >>> aligner = TemporalAligner()
        >>> now = datetime.datetime(2024, 5, 1, 10, 0, tzinfo=datetime.timezone.utc)
        >>> aligner.offsetHours(120)
        8
        >>> aligner.alignHours(8, longitude=120, now=now)
        [18, 19, 20, 21, 22, 23, 0, 1]
    """

    @staticmethod
    def offsetHours(longitude: float) -> int:
        """Approximate UTC offset in hours for longitude"""
        return roundHalfUp(longitude / DEGREES_PER_HOUR)

    @staticmethod
    def utcNow(now: Optional[datetime.datetime] = None) -> datetime.datetime:
        """Current UTC instant, naive datetimes are treated as UTC"""
        if now is None:
            return datetime.datetime.now(datetime.timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=datetime.timezone.utc)
        return now.astimezone(datetime.timezone.utc)

    def localNow(self, longitude: float, now: Optional[datetime.datetime] = None) -> datetime.datetime:
        """Viewer's wall-clock time derived from longitude"""
        offset = datetime.timedelta(hours=self.offsetHours(longitude))
        return self.utcNow(now).astimezone(datetime.timezone(offset))

    def localCurrentHour(self, longitude: float, now: Optional[datetime.datetime] = None) -> int:
        return self.localNow(longitude, now).hour

    def alignHours(self, count: int, longitude: float, now: Optional[datetime.datetime] = None) -> List[int]:
        """
        Local hour labels for a series of count hourly points

        Point i gets (localCurrentHour + i) mod 24.
        """
        currentHour = self.localCurrentHour(longitude, now)
        return [(currentHour + i) % HOURS_PER_DAY for i in range(count)]
