"""METAR decoder: tokenizer, field decoders and report assembly."""

import re
import logging
from types import MappingProxyType
from typing import Optional, List, Sequence, Tuple

from metarview.weather.models import (
    Ceiling,
    DecodedReport,
    ReportType,
    WindObservation,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"[ \t\r\n\f\v]+")
_WIND_RE = re.compile(r"^(?P<dir>\d{3}|VRB)(?P<speed>\d{2,3})(?:G(?P<gust>\d{2,3}))?KT$")
_CEILING_RE = re.compile(r"^(?P<layer>OVC|BKN|VV)(?P<height>\d{3})(?:CB|TCU)?$")
_INTEGER_RE = re.compile(r"^[0-9]+$")
_NUMBER_RE = re.compile(r"^[0-9]+(?:\.[0-9]+)?$")
_FRACTION_RE = re.compile(r"^(?P<num>[0-9]+)/(?P<den>[0-9]+)$")

# Two-letter significant weather codes. Matched as substrings, so a token
# such as "+TSRA" yields both thunderstorm and rain; an unrelated token that
# happens to contain a code (e.g. "RMK" does not, "KBRL" does) is a known
# false positive.
PHENOMENA = MappingProxyType({
    "TS": "thunderstorm",
    "RA": "rain",
    "DZ": "drizzle",
    "SN": "snow",
    "SG": "snow grains",
    "PL": "ice pellets",
    "FG": "fog",
    "BR": "mist",
    "HZ": "haze",
    "FU": "smoke",
    "SH": "showers",
})

_REPORT_TYPES = {t.value: t for t in ReportType}


class WeatherParser:
    """
    Decode METAR/SPECI lines into DecodedReport objects.

    Each field decoder scans the token list independently and returns None
    when its group is missing or malformed, so a bad group never prevents
    the rest of the report from decoding.

    Example:
        report = WeatherParser.parse_metar(
            "KJFK 121251Z 24012G18KT 1 1/2SM -RA BR OVC008 12/11 A2990"
        )
        report.visibility_sm   # 1.5
        report.ceiling_ft      # 800
    """

    @staticmethod
    def tokenize(raw_text: str) -> List[str]:
        """Split a raw line into uppercase tokens on ASCII whitespace."""
        return [tok for tok in _WHITESPACE_RE.split(raw_text.upper()) if tok]

    @classmethod
    def parse_metar(cls, raw_text: str) -> DecodedReport:
        """
        Decode a METAR or SPECI line.

        A leading METAR/SPECI keyword (and a COR marker after it) is consumed
        before the station. The timestamp is the token after the station when
        it is at least 5 characters long and ends in "Z". Field decoders scan
        all remaining tokens, so a station identifier containing a weather
        code (e.g. "KBRL") reports that phenomenon.

        Args:
            raw_text: Raw report text

        Returns:
            DecodedReport; never raises, fields that cannot be read are absent
        """
        tokens = cls.tokenize(raw_text)

        report_type = ReportType.METAR
        if tokens and tokens[0] in _REPORT_TYPES:
            report_type = _REPORT_TYPES[tokens[0]]
            tokens = tokens[1:]
            if tokens and tokens[0] == "COR":
                tokens = tokens[1:]

        if not tokens:
            return DecodedReport(raw_text=raw_text.strip(), report_type=report_type)

        station = tokens[0]
        timestamp = None
        if len(tokens) > 1 and len(tokens[1]) >= 5 and tokens[1].endswith("Z"):
            timestamp = tokens[1]

        # Field decoders see every token, station and timestamp included
        report = DecodedReport(
            station=station,
            timestamp=timestamp,
            wind=cls.decode_wind(tokens),
            visibility_sm=cls.decode_visibility(tokens),
            ceiling=cls.decode_ceiling(tokens),
            phenomena=cls.decode_phenomena(tokens),
            raw_text=raw_text.strip(),
            report_type=report_type,
        )
        if report.wind is None and report.visibility_sm is None and report.ceiling is None:
            logger.debug("No wind, visibility or ceiling decoded from: %s", raw_text[:80])
        return report

    # --- Field decoders ---

    @classmethod
    def decode_wind(cls, tokens: Sequence[str]) -> Optional[WindObservation]:
        """
        Decode the first dddss[Ggg]KT group.

        Later wind groups (e.g. wind shear) are ignored. The direction is
        taken as written, without range checking.

        Returns:
            WindObservation, or None when no wind group is present
        """
        for token in tokens:
            match = _WIND_RE.match(token)
            if not match:
                continue
            direction = None
            if match.group("dir") != "VRB":
                direction = int(match.group("dir"))
            gust = int(match.group("gust")) if match.group("gust") else None
            wind = WindObservation(
                direction=direction,
                speed=int(match.group("speed")),
                gust=gust,
            )
            if wind.gust_below_speed:
                logger.debug("Gust %s below sustained speed %s in %s", gust, wind.speed, token)
            return wind
        return None

    @classmethod
    def decode_visibility(cls, tokens: Sequence[str]) -> Optional[float]:
        """
        Decode visibility in statute miles.

        Handles "10SM", "1/2SM", "P6SM", "M1/4SM" and the two-token form
        "1 1/2SM", where a bare integer before a fraction is added to it.

        Returns:
            First positive visibility found, or None
        """
        for i, token in enumerate(tokens):
            if not token.endswith("SM"):
                continue
            prefix = token[:-2]
            total = 0.0
            if prefix:
                value = cls._safe_parse_fraction(prefix)
                if value is None:
                    logger.debug("Unreadable visibility group: %s", token)
                    continue
                total = value
            if _FRACTION_RE.match(prefix) and i > 0 and _INTEGER_RE.match(tokens[i - 1]):
                total += int(tokens[i - 1])
            if total > 0:
                return total
        return None

    @classmethod
    def decode_ceiling(cls, tokens: Sequence[str]) -> Optional[Ceiling]:
        """
        Decode the ceiling as the lowest BKN, OVC or VV layer.

        FEW and SCT layers never form a ceiling.

        Returns:
            Ceiling, or None when no qualifying layer is reported
        """
        ceiling = None
        for token in tokens:
            match = _CEILING_RE.match(token)
            if not match:
                continue
            height = int(match.group("height")) * 100
            if ceiling is None or height < ceiling.height_ft:
                ceiling = Ceiling(height_ft=height, layer=match.group("layer"))
        return ceiling

    @classmethod
    def decode_phenomena(cls, tokens: Sequence[str]) -> Tuple[str, ...]:
        """
        Decode significant weather phenomena.

        Codes are matched anywhere inside a token; within a token names are
        ordered by position. Duplicates are dropped, first occurrence kept.

        Returns:
            Tuple of phenomenon names, possibly empty
        """
        found: List[str] = []
        for token in tokens:
            hits = sorted(
                (token.find(code), name)
                for code, name in PHENOMENA.items()
                if code in token
            )
            for _, name in hits:
                if name not in found:
                    found.append(name)
        return tuple(found)

    # --- Helpers ---

    @classmethod
    def _safe_parse_fraction(cls, text: str) -> Optional[float]:
        """
        Parse a visibility value.

        Handles: "10", "0.5", "1/2", "M1/4" (M = less than), "P6" (P = more than)

        Returns:
            Float value or None if unparseable
        """
        if text[:1] in ("M", "P"):
            text = text[1:]
        if _NUMBER_RE.match(text):
            return float(text)
        return cls._parse_simple_fraction(text)

    @staticmethod
    def _parse_simple_fraction(text: str) -> Optional[float]:
        """Parse a simple fraction like '1/2' or '3/4'."""
        match = _FRACTION_RE.match(text)
        if not match:
            return None
        den = int(match.group("den"))
        if den == 0:
            return None
        return int(match.group("num")) / den
