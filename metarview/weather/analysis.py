"""Weather analysis: wind components, minima evaluation, trends."""

import logging
from math import cos, sin, radians
from typing import Optional, List, Sequence, Tuple

from metarview.weather.models import (
    DecodedReport,
    DirectionShift,
    FieldTrend,
    Minima,
    MinimaAlert,
    TrendClassification,
    TrendResult,
    WindComponents,
    WindObservation,
)

logger = logging.getLogger(__name__)

# Changes smaller than this are reported as steady
TREND_TOLERANCE = 0.05


class WeatherAnalyzer:
    """
    Aviation weather analysis functions.

    All methods are static and hold no state. A field that was
    not decoded means "cannot assess": it never raises an alert and never
    contributes to a trend.
    """

    @staticmethod
    def wind_components(
        wind: Optional[WindObservation],
        runway_heading: Optional[int],
    ) -> Optional[WindComponents]:
        """
        Calculate headwind and crosswind for a runway.

        Args:
            wind: Decoded wind, None when unknown
            runway_heading: Runway heading in degrees, None when not provided.
                0 and 360 both mean due north.

        Returns:
            WindComponents, or None if the wind is unknown or variable or the
            heading was not provided
        """
        if wind is None or wind.direction is None or runway_heading is None:
            return None

        headwind, crosswind, side = _compute_components(wind.direction, runway_heading, wind.speed)
        return WindComponents(
            runway_heading=runway_heading,
            headwind_kt=headwind,
            crosswind_kt=crosswind,
            crosswind_side=side,
        )

    @staticmethod
    def minima_alerts(
        report: DecodedReport,
        minima: Optional[Minima] = None,
        runway_heading: Optional[int] = None,
    ) -> List[MinimaAlert]:
        """
        Compare a report against operational minima.

        Each check is independent: visibility below the minimum, ceiling below
        the minimum, crosswind magnitude above the maximum.

        Args:
            report: Decoded report
            minima: Thresholds (defaults from metarview.config)
            runway_heading: Runway heading for the crosswind check

        Returns:
            Alerts in visibility, ceiling, crosswind order; empty if none apply
        """
        if minima is None:
            minima = Minima()

        alerts = []
        if report.visibility_sm is not None and report.visibility_sm < minima.min_visibility_sm:
            alerts.append(MinimaAlert.VISIBILITY)
        if report.ceiling is not None and report.ceiling.height_ft < minima.min_ceiling_ft:
            alerts.append(MinimaAlert.CEILING)

        components = WeatherAnalyzer.wind_components(report.wind, runway_heading)
        if components is not None and abs(components.crosswind_kt) > minima.max_crosswind_kt:
            alerts.append(MinimaAlert.CROSSWIND)
        return alerts

    @staticmethod
    def trend(reports: Sequence[DecodedReport]) -> Optional[TrendResult]:
        """
        Classify the change between the oldest and newest report.

        The caller guarantees oldest-to-newest order; only the two endpoints
        are compared. Higher visibility and ceiling are improvements. Wind
        direction only reports the raw shift in degrees.

        Args:
            reports: Reports ordered oldest first

        Returns:
            TrendResult, or None when fewer than two reports are given
        """
        if len(reports) < 2:
            return None

        first = reports[0]
        last = reports[-1]

        visibility = None
        if first.visibility_sm is not None and last.visibility_sm is not None:
            visibility = _field_trend(first.visibility_sm, last.visibility_sm)

        ceiling = None
        if first.ceiling is not None and last.ceiling is not None:
            ceiling = _field_trend(first.ceiling.height_ft, last.ceiling.height_ft)

        wind_direction = None
        if (
            first.wind is not None and first.wind.direction is not None
            and last.wind is not None and last.wind.direction is not None
        ):
            wind_direction = DirectionShift(
                from_deg=first.wind.direction,
                to_deg=last.wind.direction,
            )

        result = TrendResult(
            visibility=visibility,
            ceiling=ceiling,
            wind_direction=wind_direction,
        )
        logger.debug("Trend over %d reports: %s", len(reports), result)
        return result

    @staticmethod
    def classify(delta: float) -> TrendClassification:
        """Classify a signed change where larger values are better."""
        if delta > TREND_TOLERANCE:
            return TrendClassification.IMPROVING
        if delta < -TREND_TOLERANCE:
            return TrendClassification.WORSENING
        return TrendClassification.STEADY


# --- Module-level helpers (pure functions) ---

def _compute_components(
    wind_dir: int,
    runway_heading: int,
    speed: float,
) -> Tuple[float, float, str]:
    """
    Compute headwind and crosswind components.

    Returns:
        (headwind, crosswind, side) where headwind is negative for a tailwind
        and side is "left", "right" or "" when the wind is along the runway.
    """
    angle = abs(wind_dir - runway_heading) % 360
    if angle > 180:
        angle = 360 - angle
    headwind = speed * cos(radians(angle))
    crosswind = speed * sin(radians(angle))

    relative = (wind_dir - runway_heading) % 360
    if relative in (0, 180):
        side = ""
    elif relative > 180:
        side = "left"
    else:
        side = "right"

    return headwind, crosswind, side


def _field_trend(from_value: float, to_value: float) -> FieldTrend:
    return FieldTrend(
        from_value=from_value,
        to_value=to_value,
        classification=WeatherAnalyzer.classify(to_value - from_value),
    )
