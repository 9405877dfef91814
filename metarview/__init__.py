"""
METAR decoding and briefing library.

This package decodes raw METAR lines into structured reports, checks them
against operational minima, computes runway wind components and tracks
trends across a series of reports.

The main public API includes:
- DecodedReport: Decoded observation
- WeatherParser: METAR tokenizer and field decoders
- WeatherAnalyzer: Wind components, minima alerts, trends
- WeatherCollection: Queryable series of reports
- NoaaSource: Fetch current and recent METARs from NOAA
"""

__version__ = '0.1.0'
__all__ = [
    'DecodedReport',
    'WeatherParser',
    'WeatherAnalyzer',
    'WeatherCollection',
    'NoaaSource',
]

from metarview.weather import (
    DecodedReport,
    WeatherParser,
    WeatherAnalyzer,
    WeatherCollection,
)
from metarview.sources import NoaaSource
