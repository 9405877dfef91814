"""Tests for the METAR tokenizer, field decoders and report decoder."""

import pytest

from metarview.weather.parser import WeatherParser, PHENOMENA
from metarview.weather.models import Ceiling, DecodedReport, ReportType


class TestTokenize:

    def test_uppercases_and_splits(self):
        assert WeatherParser.tokenize("kjfk  121251z\t20020kt\n") == ["KJFK", "121251Z", "20020KT"]

    def test_empty(self):
        assert WeatherParser.tokenize("") == []
        assert WeatherParser.tokenize("   \t ") == []


class TestDecodeWind:

    def test_variable(self):
        wind = WeatherParser.decode_wind(["VRB05KT"])
        assert wind is not None
        assert wind.direction is None
        assert wind.speed == 5
        assert wind.gust is None
        assert wind.is_variable

    def test_gust(self):
        wind = WeatherParser.decode_wind(["24012G18KT"])
        assert wind.direction == 240
        assert wind.speed == 12
        assert wind.gust == 18

    def test_three_digit_speed_and_gust(self):
        wind = WeatherParser.decode_wind(["270110G130KT"])
        assert wind.speed == 110
        assert wind.gust == 130

    @pytest.mark.parametrize("direction,speed", [(0, 0), (90, 7), (360, 45)])
    def test_direction_and_speed_roundtrip(self, direction, speed):
        group = f"{direction:03d}{speed:02d}KT"
        wind = WeatherParser.decode_wind([group])
        assert f"{wind.direction:03d}{wind.speed:02d}KT" == group

    def test_calm_is_reported_wind(self):
        wind = WeatherParser.decode_wind(["00000KT"])
        assert wind is not None
        assert wind.is_calm

    def test_first_group_wins(self):
        wind = WeatherParser.decode_wind(["24012KT", "18030KT"])
        assert wind.direction == 240

    def test_direction_not_range_checked(self):
        wind = WeatherParser.decode_wind(["40010KT"])
        assert wind.direction == 400

    def test_gust_below_speed_accepted(self):
        wind = WeatherParser.decode_wind(["24020G10KT"])
        assert wind.gust == 10
        assert wind.gust_below_speed

    def test_whole_token_must_match(self):
        assert WeatherParser.decode_wind(["24012KTS"]) is None
        assert WeatherParser.decode_wind(["24012MPS"]) is None
        assert WeatherParser.decode_wind(["2401KT"]) is None

    def test_missing_is_unknown(self):
        assert WeatherParser.decode_wind(["10SM", "OVC008"]) is None


class TestDecodeVisibility:

    def test_fraction(self):
        assert WeatherParser.decode_visibility(["1/2SM"]) == pytest.approx(0.5)

    def test_two_token_mixed_number(self):
        assert WeatherParser.decode_visibility(["1", "1/2SM"]) == pytest.approx(1.5)

    def test_whole_number(self):
        assert WeatherParser.decode_visibility(["10SM"]) == pytest.approx(10.0)

    def test_more_than_and_less_than(self):
        assert WeatherParser.decode_visibility(["P6SM"]) == pytest.approx(6.0)
        assert WeatherParser.decode_visibility(["M1/4SM"]) == pytest.approx(0.25)

    def test_integer_not_added_to_whole_number(self):
        assert WeatherParser.decode_visibility(["2", "3SM"]) == pytest.approx(3.0)

    def test_zero_is_skipped(self):
        assert WeatherParser.decode_visibility(["0SM"]) is None
        assert WeatherParser.decode_visibility(["1/0SM", "3SM"]) == pytest.approx(3.0)

    def test_unreadable_prefix_skipped(self):
        assert WeatherParser.decode_visibility(["XXSM", "4SM"]) == pytest.approx(4.0)

    def test_metric_visibility_not_decoded(self):
        assert WeatherParser.decode_visibility(["9999"]) is None

    def test_missing_is_unknown(self):
        assert WeatherParser.decode_visibility([]) is None


class TestDecodeCeiling:

    def test_lowest_layer_wins(self):
        assert WeatherParser.decode_ceiling(["OVC008", "BKN015"]) == Ceiling(800, "OVC")
        assert WeatherParser.decode_ceiling(["BKN015", "OVC008"]) == Ceiling(800, "OVC")

    def test_vertical_visibility(self):
        assert WeatherParser.decode_ceiling(["VV002"]) == Ceiling(200, "VV")

    def test_few_and_scattered_are_not_ceilings(self):
        assert WeatherParser.decode_ceiling(["FEW005", "SCT010", "SKC", "CLR"]) is None

    def test_convective_suffix(self):
        assert WeatherParser.decode_ceiling(["BKN030CB"]) == Ceiling(3000, "BKN")

    def test_requires_three_digits(self):
        assert WeatherParser.decode_ceiling(["BKN0150", "OVC08", "OVC///"]) is None

    def test_tie_keeps_first(self):
        assert WeatherParser.decode_ceiling(["BKN010", "OVC010"]).layer == "BKN"


class TestDecodePhenomena:

    def test_combined_code(self):
        assert WeatherParser.decode_phenomena(["+TSRA"]) == ("thunderstorm", "rain")

    def test_order_and_dedup(self):
        assert WeatherParser.decode_phenomena(["-SHRA", "BR", "RA"]) == ("showers", "rain", "mist")

    def test_substring_match(self):
        assert WeatherParser.decode_phenomena(["FZFG"]) == ("fog",)
        assert WeatherParser.decode_phenomena(["VCSH"]) == ("showers",)

    def test_substring_false_positive(self):
        """Any token containing a code matches, including non-weather groups."""
        assert WeatherParser.decode_phenomena(["KBRL"]) == ("mist",)

    def test_none(self):
        assert WeatherParser.decode_phenomena(["20020KT", "10SM", "FEW250"]) == ()

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            PHENOMENA["GR"] = "hail"


class TestParseMetar:

    def test_full_report(self):
        raw = "KJFK 121251Z 20020KT 1 1/2SM -RA BR OVC008 12/11 A2990"
        report = WeatherParser.parse_metar(raw)

        assert report.station == "KJFK"
        assert report.timestamp == "121251Z"
        assert report.wind.direction == 200
        assert report.wind.speed == 20
        assert report.visibility_sm == pytest.approx(1.5)
        assert report.ceiling == Ceiling(800, "OVC")
        assert report.ceiling_ft == 800
        assert report.phenomena == ("rain", "mist")
        assert report.raw_text == raw
        assert report.report_type == ReportType.METAR

    def test_report_type_prefix(self):
        report = WeatherParser.parse_metar("METAR EGLL 211250Z 27010KT 9999 SCT030 BKN045 15/08 Q1020")
        assert report.station == "EGLL"
        assert report.report_type == ReportType.METAR
        assert report.visibility_sm is None
        assert report.ceiling == Ceiling(4500, "BKN")
        assert report.phenomena == ()

    def test_speci_correction(self):
        report = WeatherParser.parse_metar("SPECI COR KJFK 121300Z 21025G35KT 1/2SM +TSRA VV003")
        assert report.report_type == ReportType.SPECI
        assert report.station == "KJFK"
        assert report.timestamp == "121300Z"
        assert report.ceiling == Ceiling(300, "VV")

    def test_timestamp_requires_trailing_z(self):
        report = WeatherParser.parse_metar("KJFK AUTO 20010KT 10SM")
        assert report.timestamp is None
        assert report.wind.direction == 200

    def test_short_timestamp(self):
        assert WeatherParser.parse_metar("KJFK 1251Z 20010KT").timestamp == "1251Z"

    def test_lowercase_input(self):
        report = WeatherParser.parse_metar("kjfk 121251z vrb03kt 3sm")
        assert report.station == "KJFK"
        assert report.wind.is_variable
        assert report.visibility_sm == pytest.approx(3.0)

    def test_empty_string(self):
        report = WeatherParser.parse_metar("")
        assert report.station is None
        assert report.timestamp is None
        assert report.wind is None
        assert report.visibility_sm is None
        assert report.ceiling is None
        assert report.phenomena == ()

    def test_garbage_degrades(self):
        report = WeatherParser.parse_metar("HELLO WORLD")
        assert report.station == "HELLO"
        assert report.timestamp is None
        assert report.wind is None
        assert report.visibility_sm is None
        assert report.ceiling is None

    @pytest.mark.parametrize("raw,expected", [
        ("KBRL 121251Z 20010KT 10SM", ("mist",)),
        ("KSHV 121253Z 18006KT 10SM", ("showers",)),
        ("KBRL 121251Z 20010KT 10SM -RA", ("mist", "rain")),
    ])
    def test_station_token_is_scanned(self, raw, expected):
        """Weather codes inside the station identifier are reported too."""
        report = WeatherParser.parse_metar(raw)
        assert report.phenomena == expected
        assert report.wind.direction in (180, 200)
        assert report.visibility_sm == pytest.approx(10.0)

    def test_from_metar(self):
        raw = "KJFK 121251Z 20020KT 10SM FEW250"
        assert DecodedReport.from_metar(raw) == WeatherParser.parse_metar(raw)
