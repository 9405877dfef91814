"""NOAA TGFTP source for current and recent METAR text."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import requests

from metarview import config

logger = logging.getLogger(__name__)


class NoaaSource:
    """
    Fetch raw METAR lines from the NOAA observation file server.

    Two kinds of files are used: one per station holding its latest report,
    and one per UTC hour ("cycle file") holding every station's reports for
    that hour. History is assembled by walking cycle files backward.

    Failures are logged and produce empty results; nothing is retried.

    Example:
        source = NoaaSource()
        latest = source.fetch_latest("KJFK")
        history = source.fetch_history("KJFK", 6)   # oldest first
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = config.FETCH_TIMEOUT):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
        """
        if session is None:
            session = requests.Session()
            # requests ships its own default User-Agent; replace it
            session.headers["User-Agent"] = config.USER_AGENT
        else:
            session.headers.setdefault("User-Agent", config.USER_AGENT)
        self._session = session
        self._timeout = timeout
        self._cycles: Dict[int, List[str]] = {}

    def fetch_latest(self, icao: str) -> Optional[str]:
        """
        Fetch the most recent report for a station.

        Args:
            icao: Station identifier

        Returns:
            Raw METAR line, or None if unavailable
        """
        icao = self._clean_icao(icao)
        if icao is None:
            return None
        text = self._fetch_raw(config.NOAA_STATION_URL.format(icao=icao))
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            return None
        # First line of the station file is the retrieval date
        return lines[-1]

    def fetch_history(self, icao: str, count: int, now: Optional[datetime] = None) -> List[str]:
        """
        Fetch up to `count` recent reports for a station.

        Walks hourly cycle files from the current hour backward, at most
        config.HISTORY_MAX_HOURS hours, dropping repeated lines.

        Args:
            icao: Station identifier
            count: Number of reports wanted
            now: Current UTC time (defaults to the system clock)

        Returns:
            Raw METAR lines ordered oldest first
        """
        icao = self._clean_icao(icao)
        if icao is None or count <= 0:
            return []
        if now is None:
            now = datetime.now(timezone.utc)

        collected: List[str] = []
        for back in range(config.HISTORY_MAX_HOURS):
            if len(collected) >= count:
                break
            hour = (now - timedelta(hours=back)).hour
            station_lines = [line for line in self._cycle_lines(hour) if line.startswith(icao + " ")]
            # Newest first while walking backward
            for line in reversed(station_lines):
                if len(collected) >= count:
                    break
                if line not in collected:
                    collected.append(line)

        logger.debug("Collected %d of %d reports for %s", len(collected), count, icao)
        collected.reverse()
        return collected

    def clear_cache(self) -> None:
        """Forget cycle files fetched so far."""
        self._cycles.clear()

    def _cycle_lines(self, hour: int) -> List[str]:
        """Non-empty lines of the cycle file for a UTC hour, fetched once per source."""
        if hour not in self._cycles:
            text = self._fetch_raw(config.NOAA_CYCLE_URL.format(hour=hour))
            self._cycles[hour] = [line.strip() for line in text.splitlines() if line.strip()]
        return self._cycles[hour]

    def _fetch_raw(self, url: str) -> str:
        """
        Make HTTP GET request and return raw text.

        Handles 404 (no file for the station or hour) by returning empty string.
        """
        try:
            response = self._session.get(url, timeout=self._timeout)
            if response.status_code == 404:
                logger.info("No NOAA data at %s", url)
                return ""
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            logger.warning("NOAA fetch failed for %s: %s", url, e)
            return ""

    @staticmethod
    def _clean_icao(icao: str) -> Optional[str]:
        cleaned = icao.strip().upper()
        if len(cleaned) < 3:
            logger.warning("Invalid station identifier: %r", icao)
            return None
        return cleaned
