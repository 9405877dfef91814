"""Weather report data models."""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, List, Tuple

from dateutil.relativedelta import relativedelta

from metarview import config

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(r"^(\d{2})(\d{2})(\d{2})Z$")

# Reports stamped slightly ahead of the reference clock still belong to it
_CLOCK_SKEW = timedelta(hours=1)


class ReportType(Enum):
    """Type of routine observation."""

    METAR = "METAR"
    SPECI = "SPECI"


class TrendClassification(Enum):
    """Direction of change of a field between two reports."""

    IMPROVING = "improving"
    WORSENING = "worsening"
    STEADY = "steady"


class MinimaAlert(Enum):
    """Alert raised when a decoded field breaches the configured minima."""

    VISIBILITY = "visibility below minima"
    CEILING = "ceiling below minima"
    CROSSWIND = "crosswind exceeds minima"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class WindObservation:
    """
    A reported surface wind group.

    Attributes:
        direction: True bearing in degrees, None when reported variable (VRB)
        speed: Sustained speed in knots
        gust: Gust speed in knots, None when no gust was reported
    """

    direction: Optional[int] = None
    speed: int = 0
    gust: Optional[int] = None

    @property
    def is_variable(self) -> bool:
        return self.direction is None

    @property
    def is_calm(self) -> bool:
        """True for a reported calm wind (00000KT), as opposed to an unknown one."""
        return self.speed == 0 and self.direction in (0, None) and self.gust is None

    @property
    def gust_below_speed(self) -> bool:
        """Gusts are expected to be at least the sustained speed; the decoder does not enforce it."""
        return self.gust is not None and self.gust < self.speed

    def to_dict(self) -> dict:
        return {
            'direction': self.direction,
            'speed': self.speed,
            'gust': self.gust,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WindObservation':
        return cls(
            direction=data.get('direction'),
            speed=data.get('speed', 0),
            gust=data.get('gust'),
        )


@dataclass(frozen=True)
class Ceiling:
    """Lowest broken, overcast or vertical-visibility layer."""

    height_ft: int
    layer: str  # "OVC", "BKN" or "VV"

    def to_dict(self) -> dict:
        return {'height_ft': self.height_ft, 'layer': self.layer}


@dataclass(frozen=True)
class Minima:
    """
    Go/no-go weather thresholds.

    Defaults come from metarview.config and can be overridden per instance.

    Raises:
        ValueError: if any threshold is negative
    """

    min_ceiling_ft: float = config.MIN_CEILING_FT
    min_visibility_sm: float = config.MIN_VISIBILITY_SM
    max_crosswind_kt: float = config.MAX_CROSSWIND_KT

    def __post_init__(self):
        for name in ('min_ceiling_ft', 'min_visibility_sm', 'max_crosswind_kt'):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def to_dict(self) -> dict:
        return {
            'min_ceiling_ft': self.min_ceiling_ft,
            'min_visibility_sm': self.min_visibility_sm,
            'max_crosswind_kt': self.max_crosswind_kt,
        }


@dataclass(frozen=True)
class WindComponents:
    """
    Wind components relative to a runway.

    Positive headwind means wind is coming from ahead. The crosswind is the
    perpendicular component over an angle normalised to [0, 180] degrees;
    crosswind_side tells which side of the centerline it blows from.
    """

    runway_heading: int
    headwind_kt: float
    crosswind_kt: float
    crosswind_side: str = ""  # "left", "right" or "" when aligned

    def to_dict(self) -> dict:
        return {
            'runway_heading': self.runway_heading,
            'headwind_kt': self.headwind_kt,
            'crosswind_kt': self.crosswind_kt,
            'crosswind_side': self.crosswind_side,
        }


@dataclass(frozen=True)
class FieldTrend:
    """Change of a visibility or ceiling value from the oldest to the newest report."""

    from_value: float
    to_value: float
    classification: TrendClassification

    @property
    def delta(self) -> float:
        return self.to_value - self.from_value

    def to_dict(self) -> dict:
        return {
            'from': self.from_value,
            'to': self.to_value,
            'state': self.classification.value,
        }


@dataclass(frozen=True)
class DirectionShift:
    """Raw change of wind direction; a bearing shift carries no better/worse meaning."""

    from_deg: int
    to_deg: int

    @property
    def delta(self) -> int:
        return self.to_deg - self.from_deg

    def to_dict(self) -> dict:
        return {'from': self.from_deg, 'to': self.to_deg, 'shift': self.delta}


@dataclass(frozen=True)
class TrendResult:
    """Per-field trend over an oldest-to-newest series; fields missing at either end are None."""

    visibility: Optional[FieldTrend] = None
    ceiling: Optional[FieldTrend] = None
    wind_direction: Optional[DirectionShift] = None

    def is_empty(self) -> bool:
        return self.visibility is None and self.ceiling is None and self.wind_direction is None

    def to_dict(self) -> dict:
        result = {}
        if self.visibility is not None:
            result['visibility'] = self.visibility.to_dict()
        if self.ceiling is not None:
            result['ceiling'] = self.ceiling.to_dict()
        if self.wind_direction is not None:
            result['wind_dir'] = self.wind_direction.to_dict()
        return result


@dataclass(frozen=True)
class DecodedReport:
    """
    Decoded METAR or SPECI observation.

    Every field that could not be determined is None (or empty for
    phenomena); absence is never encoded as zero.

    Attributes:
        station: Station identifier (first token after any report-type keyword)
        timestamp: Opaque DDHHMMZ observation time string
        wind: Surface wind, None when no wind group was found
        visibility_sm: Prevailing visibility in statute miles
        ceiling: Lowest BKN/OVC/VV layer
        phenomena: Significant weather names, first-seen order
        raw_text: Original report line
        report_type: METAR or SPECI
    """

    station: Optional[str] = None
    timestamp: Optional[str] = None
    wind: Optional[WindObservation] = None
    visibility_sm: Optional[float] = None
    ceiling: Optional[Ceiling] = None
    phenomena: Tuple[str, ...] = field(default_factory=tuple)
    raw_text: str = ""
    report_type: ReportType = ReportType.METAR

    @classmethod
    def from_metar(cls, raw_text: str) -> 'DecodedReport':
        """
        Decode a raw report line.

        Args:
            raw_text: Raw METAR/SPECI text

        Returns:
            DecodedReport, never None; unreadable fields are absent
        """
        from metarview.weather.parser import WeatherParser
        return WeatherParser.parse_metar(raw_text)

    @property
    def ceiling_ft(self) -> Optional[int]:
        return self.ceiling.height_ft if self.ceiling else None

    def wind_components(self, runway_heading: Optional[int]) -> Optional[WindComponents]:
        """
        Calculate wind components for a given runway.

        Args:
            runway_heading: Runway heading in degrees, None if not provided

        Returns:
            WindComponents or None if wind direction or heading is unavailable
        """
        from metarview.weather.analysis import WeatherAnalyzer
        return WeatherAnalyzer.wind_components(self.wind, runway_heading)

    def minima_alerts(
        self,
        minima: Optional[Minima] = None,
        runway_heading: Optional[int] = None,
    ) -> List[MinimaAlert]:
        """Alerts for this report against the given minima."""
        from metarview.weather.analysis import WeatherAnalyzer
        return WeatherAnalyzer.minima_alerts(self, minima, runway_heading)

    def observation_time(self, reference: Optional[datetime] = None) -> Optional[datetime]:
        """
        Resolve the DDHHMMZ timestamp to a UTC datetime.

        The report carries no month or year, so the most recent matching day
        at or before the reference time is used, stepping back across month
        boundaries when needed.

        Args:
            reference: Time the report was retrieved (defaults to now, UTC)

        Returns:
            Timezone-aware datetime, or None if the timestamp is absent or invalid
        """
        if not self.timestamp:
            return None
        match = _TIMESTAMP_RE.match(self.timestamp)
        if not match:
            return None
        day, hour, minute = (int(g) for g in match.groups())
        if not (1 <= day <= 31 and hour <= 23 and minute <= 59):
            logger.debug("Timestamp out of range: %s", self.timestamp)
            return None

        if reference is None:
            reference = datetime.now(timezone.utc)
        elif reference.tzinfo is None:
            reference = reference.replace(tzinfo=timezone.utc)

        for months_back in range(3):
            candidate = reference + relativedelta(
                months=-months_back, day=day, hour=hour, minute=minute,
                second=0, microsecond=0,
            )
            # relativedelta clamps day 31 to the month end
            if candidate.day != day:
                continue
            if candidate <= reference + _CLOCK_SKEW:
                return candidate
        return None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            'station': self.station,
            'report_type': self.report_type.value,
            'timestamp': self.timestamp,
            'raw_text': self.raw_text,
            'wind': self.wind.to_dict() if self.wind else None,
            'visibility_sm': self.visibility_sm,
            'ceiling': self.ceiling.to_dict() if self.ceiling else None,
            'phenomena': list(self.phenomena),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DecodedReport':
        """Create DecodedReport from dictionary."""
        report_type = ReportType.METAR
        if data.get('report_type'):
            try:
                report_type = ReportType(data['report_type'])
            except ValueError:
                logger.debug("Unknown report type %r, using METAR", data['report_type'])

        wind = None
        if data.get('wind'):
            wind = WindObservation.from_dict(data['wind'])

        ceiling = None
        if data.get('ceiling'):
            ceiling = Ceiling(
                height_ft=data['ceiling']['height_ft'],
                layer=data['ceiling']['layer'],
            )

        return cls(
            station=data.get('station'),
            timestamp=data.get('timestamp'),
            wind=wind,
            visibility_sm=data.get('visibility_sm'),
            ceiling=ceiling,
            phenomena=tuple(data.get('phenomena', ())),
            raw_text=data.get('raw_text', ''),
            report_type=report_type,
        )

    def __repr__(self) -> str:
        stamp = f" {self.timestamp}" if self.timestamp else ""
        return f"DecodedReport({self.report_type.value} {self.station or '?'}{stamp})"
