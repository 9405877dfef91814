"""Tests for Briefing serialization."""

import json

import pytest

from metarview.briefing import Briefing
from metarview.weather.models import Minima, TrendClassification


LOW_METAR = "KJFK 121251Z 20020KT 2SM BR OVC008"


class TestReportToDict:

    def test_wind_components_and_alerts(self):
        briefing = Briefing([LOW_METAR], runway_heading=220)
        data = briefing.to_dict()['metars'][0]

        assert data['raw'] == LOW_METAR
        assert data['station'] == "KJFK"
        assert data['timestamp'] == "121251Z"
        assert data['wind'] == {
            'dir': 200,
            'spd': 20,
            'headwind': 18.8,
            'crosswind': 6.8,
            'crosswind_side': 'left',
        }
        assert data['visibility_sm'] == 2.0
        assert data['ceiling_ft'] == 800
        assert data['ceiling_layer'] == "OVC"
        assert data['weather'] == ["mist"]
        assert data['alerts'] == {'visibility': 'below minima', 'ceiling': 'below minima'}

    def test_no_heading_means_no_components(self):
        data = Briefing(["KJFK 121251Z 20020G28KT 10SM"]).to_dict()['metars'][0]
        assert data['wind'] == {'dir': 200, 'spd': 20, 'gust': 28}
        assert data['alerts'] == {}

    def test_crosswind_alert(self):
        briefing = Briefing(["KJFK 121251Z 29020KT 10SM"], minima=Minima(max_crosswind_kt=10), runway_heading=200)
        data = briefing.to_dict()['metars'][0]
        assert data['alerts'] == {'crosswind': 'exceeds minima'}

    def test_undecodable_line(self):
        data = Briefing(["garbage"]).to_dict()['metars'][0]
        assert data['wind'] == {'dir': None, 'spd': None}
        assert data['visibility_sm'] is None
        assert data['ceiling_ft'] is None
        assert data['weather'] == []

    def test_visibility_rounded(self):
        data = Briefing(["KJFK 121251Z 1/3SM"]).to_dict()['metars'][0]
        assert data['visibility_sm'] == 0.33


class TestBriefing:

    def test_single_report_has_no_trend(self):
        assert Briefing([LOW_METAR]).to_dict()['trend'] is None

    def test_trend(self, kjfk_series):
        briefing = Briefing(kjfk_series)
        assert briefing.trend.visibility.classification == TrendClassification.WORSENING
        assert briefing.to_dict()['trend']['visibility'] == {'from': 10.0, 'to': 2.0, 'state': 'worsening'}

    def test_taf_only_when_given(self):
        assert 'taf_raw' not in Briefing([LOW_METAR]).to_dict()
        taf = "TAF KJFK 121130Z 1212/1318 20015KT P6SM BKN020"
        assert Briefing([LOW_METAR], taf_raw=taf).to_dict()['taf_raw'] == taf

    def test_to_json(self, kjfk_series):
        data = json.loads(Briefing(kjfk_series, runway_heading=220).to_json())
        assert len(data['metars']) == 3
        assert data['metars'][-1]['wind']['headwind'] == pytest.approx(18.8)

    def test_weather_query(self, kjfk_series):
        assert Briefing(kjfk_series).weather_query.count() == 3
