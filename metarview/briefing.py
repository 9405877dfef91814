"""Briefing container: a series of reports with the minima and runway they are judged against."""

import json
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from metarview.weather.models import DecodedReport, Minima, MinimaAlert, TrendResult
from metarview.weather.collection import WeatherCollection

# JSON key and message per alert
_ALERT_FIELDS = {
    MinimaAlert.VISIBILITY: ('visibility', 'below minima'),
    MinimaAlert.CEILING: ('ceiling', 'below minima'),
    MinimaAlert.CROSSWIND: ('crosswind', 'exceeds minima'),
}


@dataclass
class Briefing:
    """
    Decoded reports for one request, oldest first.

    Attributes:
        raw_reports: Raw METAR lines, ordered oldest to newest
        minima: Thresholds for alerts
        runway_heading: Runway heading in degrees, None when not provided
        taf_raw: Forecast text carried through undecoded
        reports: Decoded reports, one per raw line

    Example:
        briefing = Briefing(["KJFK 121151Z 20012KT 10SM FEW250", "KJFK 121251Z 20020KT 2SM BR OVC008"],
                            runway_heading=220)
        briefing.trend.visibility.classification   # TrendClassification.WORSENING
    """

    raw_reports: List[str]
    minima: Minima = field(default_factory=Minima)
    runway_heading: Optional[int] = None
    taf_raw: Optional[str] = None
    reports: List[DecodedReport] = field(init=False)

    def __post_init__(self):
        self.reports = [DecodedReport.from_metar(raw) for raw in self.raw_reports]

    @property
    def weather_query(self) -> WeatherCollection:
        """Queryable collection over the decoded reports."""
        return WeatherCollection(self.reports)

    @property
    def trend(self) -> Optional[TrendResult]:
        return self.weather_query.trend()

    def alerts(self, report: DecodedReport) -> List[MinimaAlert]:
        return report.minima_alerts(self.minima, self.runway_heading)

    def report_to_dict(self, report: DecodedReport) -> Dict[str, Any]:
        """Flat summary of one report, including wind components and alerts."""
        wind: Dict[str, Any] = {'dir': None, 'spd': None}
        if report.wind is not None:
            wind = {'dir': report.wind.direction, 'spd': report.wind.speed}
            if report.wind.gust is not None:
                wind['gust'] = report.wind.gust
            components = report.wind_components(self.runway_heading)
            if components is not None:
                wind['headwind'] = round(components.headwind_kt, 1)
                wind['crosswind'] = round(components.crosswind_kt, 1)
                wind['crosswind_side'] = components.crosswind_side

        alerts = {}
        for alert in self.alerts(report):
            key, message = _ALERT_FIELDS[alert]
            alerts[key] = message

        return {
            'raw': report.raw_text,
            'station': report.station,
            'timestamp': report.timestamp,
            'wind': wind,
            'visibility_sm': round(report.visibility_sm, 2) if report.visibility_sm is not None else None,
            'ceiling_ft': report.ceiling_ft,
            'ceiling_layer': report.ceiling.layer if report.ceiling else None,
            'weather': list(report.phenomena),
            'alerts': alerts,
        }

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        trend = self.trend
        result = {
            'metars': [self.report_to_dict(r) for r in self.reports],
            'trend': trend.to_dict() if trend is not None else None,
        }
        if self.taf_raw:
            result['taf_raw'] = self.taf_raw
        return result

    def to_json(self, indent: int = 2) -> str:
        """
        Serialize to JSON string.

        Args:
            indent: JSON indentation level
        """
        return json.dumps(self.to_dict(), indent=indent)
