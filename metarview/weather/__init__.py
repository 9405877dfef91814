"""
Weather module for decoding and analyzing METAR reports.

Provides:
- DecodedReport: Decoded METAR/SPECI data
- WindObservation, Ceiling: Decoded field values
- Minima, MinimaAlert: Operational thresholds and the alerts they raise
- WindComponents: Headwind/crosswind for a runway
- TrendResult: Change between the oldest and newest report of a series
- WeatherParser: Tokenize and decode raw METAR text
- WeatherAnalyzer: Wind components, minima evaluation, trends
- WeatherCollection: Queryable collection of decoded reports

Example:
    from metarview.weather import DecodedReport, Minima

    report = DecodedReport.from_metar(
        "KJFK 121251Z 20020KT 2SM BR OVC008 12/11 A2990"
    )
    report.wind_components(220)       # WindComponents(headwind_kt=18.79..., ...)
    report.minima_alerts(Minima(), 220)
"""

from metarview.weather.models import (
    Ceiling,
    DecodedReport,
    DirectionShift,
    FieldTrend,
    Minima,
    MinimaAlert,
    ReportType,
    TrendClassification,
    TrendResult,
    WindComponents,
    WindObservation,
)
from metarview.weather.parser import WeatherParser, PHENOMENA
from metarview.weather.analysis import WeatherAnalyzer
from metarview.weather.collection import WeatherCollection

__all__ = [
    'Ceiling',
    'DecodedReport',
    'DirectionShift',
    'FieldTrend',
    'Minima',
    'MinimaAlert',
    'ReportType',
    'TrendClassification',
    'TrendResult',
    'WindComponents',
    'WindObservation',
    'WeatherParser',
    'PHENOMENA',
    'WeatherAnalyzer',
    'WeatherCollection',
]
