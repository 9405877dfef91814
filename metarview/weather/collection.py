"""Queryable collection for decoded report series."""

from datetime import datetime, timezone
from typing import List, Dict, Optional, Iterable

import pandas as pd

from metarview.models.queryable_collection import QueryableCollection
from metarview.weather.models import DecodedReport, Minima, TrendResult
from metarview.weather.analysis import WeatherAnalyzer

DATAFRAME_COLUMNS = [
    'station',
    'timestamp',
    'wind_dir',
    'wind_speed',
    'wind_gust',
    'visibility_sm',
    'ceiling_ft',
    'ceiling_layer',
    'weather',
    'raw',
]

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class WeatherCollection(QueryableCollection[DecodedReport]):
    """
    Queryable collection of decoded reports.

    Adds station, time, minima and wind filters on top of QueryableCollection,
    plus trend analysis over the series.

    Example:
        coll = WeatherCollection.from_raw(lines)
        series = coll.for_station("KJFK").chronological()
        trend = series.trend()
        bad = series.with_alerts(Minima(), runway_heading=220).all()
    """

    @classmethod
    def from_raw(cls, lines: Iterable[str]) -> 'WeatherCollection':
        """Decode raw report lines, skipping blank ones."""
        return cls([DecodedReport.from_metar(line) for line in lines if line.strip()])

    def _new_collection(self, items: List[DecodedReport]) -> 'WeatherCollection':
        return WeatherCollection(items)

    # --- Location filters ---

    def for_station(self, icao: str) -> 'WeatherCollection':
        """Filter reports for a specific station."""
        icao_upper = icao.upper()
        return self.filter(lambda r: r.station == icao_upper)

    def for_stations(self, icaos: List[str]) -> 'WeatherCollection':
        """Filter reports for any of the given stations."""
        icaos_upper = {i.upper() for i in icaos}
        return self.filter(lambda r: r.station in icaos_upper)

    # --- Time ---

    def chronological(self, reference: Optional[datetime] = None) -> 'WeatherCollection':
        """
        Sort reports oldest first by resolved observation time.

        Reports without a usable timestamp sort first, keeping their
        relative order.

        Args:
            reference: Retrieval time used to resolve DDHHMMZ stamps (defaults to now)
        """
        if reference is None:
            reference = datetime.now(timezone.utc)
        return self._new_collection(
            sorted(
                self._items,
                key=lambda r: r.observation_time(reference) or _EARLIEST,
            )
        )

    def latest(self, reference: Optional[datetime] = None) -> Optional[DecodedReport]:
        """
        Get the most recent report by observation time.

        Falls back to the last report when none has a usable timestamp.
        """
        if reference is None:
            reference = datetime.now(timezone.utc)
        with_time = [r for r in self._items if r.observation_time(reference) is not None]
        if not with_time:
            return self.last()
        return max(with_time, key=lambda r: r.observation_time(reference))

    # --- Weather filters ---

    def with_phenomenon(self, name: str) -> 'WeatherCollection':
        """Filter reports mentioning a phenomenon, e.g. "thunderstorm"."""
        return self.filter(lambda r: name in r.phenomena)

    def with_alerts(
        self,
        minima: Optional[Minima] = None,
        runway_heading: Optional[int] = None,
    ) -> 'WeatherCollection':
        """Filter reports raising at least one minima alert."""
        return self.filter(lambda r: bool(WeatherAnalyzer.minima_alerts(r, minima, runway_heading)))

    def crosswind_exceeds(self, runway_heading: int, limit_kt: float) -> 'WeatherCollection':
        """
        Filter reports whose crosswind magnitude exceeds a limit.

        Reports without usable wind components are excluded.
        """
        def exceeds(report: DecodedReport) -> bool:
            wc = WeatherAnalyzer.wind_components(report.wind, runway_heading)
            return wc is not None and abs(wc.crosswind_kt) > limit_kt

        return self.filter(exceeds)

    # --- Analysis ---

    def trend(self) -> Optional[TrendResult]:
        """Trend between the first and last report, as currently ordered."""
        return WeatherAnalyzer.trend(self._items)

    def group_by_station(self) -> Dict[str, 'WeatherCollection']:
        """Group reports by station."""
        groups = self.group_by(lambda r: r.station)
        return {k: self._new_collection(v) for k, v in groups.items()}

    def to_dataframe(self) -> pd.DataFrame:
        """One row per report, in collection order."""
        rows = []
        for r in self._items:
            rows.append({
                'station': r.station,
                'timestamp': r.timestamp,
                'wind_dir': r.wind.direction if r.wind else None,
                'wind_speed': r.wind.speed if r.wind else None,
                'wind_gust': r.wind.gust if r.wind else None,
                'visibility_sm': r.visibility_sm,
                'ceiling_ft': r.ceiling_ft,
                'ceiling_layer': r.ceiling.layer if r.ceiling else None,
                'weather': ';'.join(r.phenomena),
                'raw': r.raw_text,
            })
        return pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)
