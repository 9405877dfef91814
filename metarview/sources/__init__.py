"""Sources of raw METAR text."""

from metarview.sources.noaa import NoaaSource

__all__ = ['NoaaSource']
