"""Tests for entry-fee queries and their projections into page entries."""

from unittest.mock import patch

import pytest

from trail_costs.airtable_client import Record
from trail_costs.services.entry_fees import (
    CostEntry,
    get_race_detail,
    is_checked,
    list_cost_entries,
    select_primary,
    slug_formula,
    to_cost_entry,
    to_race_detail,
)
from trail_costs.tests.conftest import make_record


def _records(payload):
    return [Record(id=r["id"], fields=r["fields"]) for r in payload["records"]]


class TestCostEntries:
    def test_queries_public_view_sorted_by_rate(self, entry_fees_payload):
        with patch("trail_costs.airtable_client.fetch_records",
                   return_value=_records(entry_fees_payload)) as mock_fetch:
            entries = list_cost_entries()

        table, params = mock_fetch.call_args.args
        assert table == "Entry Fees"
        assert params["view"] == "entry_fees_public"
        assert params["sort[0][field]"] == "AUTO €/km"
        assert params["sort[0][direction]"] == "asc"
        assert params["filterByFormula"] is None
        assert len(entries) == 3
        assert all(isinstance(e, CostEntry) for e in entries)

    def test_full_row(self, entry_fees_payload):
        entry = to_cost_entry(_records(entry_fees_payload)[0])
        assert entry.name == "Beara Way Ultra (IMRA) – 161 km"
        assert entry.href == "/races/beara-way-ultra"
        assert entry.location == "Ireland · Cork"
        assert entry.flag_url == "https://flagcdn.com/w320/ie.png"
        assert entry.thumb_url == "https://v5.airtableusercontent.com/beara.jpg"
        assert entry.distance_km == "161"
        assert entry.fee == "125 EUR"
        assert entry.eur_per_km == "€0.78"
        assert entry.band == "0–1"
        assert entry.band_class == "band-cheap"
        assert entry.start_date == "June 12"

    def test_row_without_slug_has_no_link(self, entry_fees_payload):
        entry = to_cost_entry(_records(entry_fees_payload)[1])
        assert entry.href is None
        assert entry.name == "Sierra Nevada Trail"

    def test_zero_fee_is_unknown(self, entry_fees_payload):
        entry = to_cost_entry(_records(entry_fees_payload)[1])
        assert entry.fee is None
        assert entry.eur_per_km == "€1.45"

    def test_unknown_country_has_no_flag(self, entry_fees_payload):
        entry = to_cost_entry(_records(entry_fees_payload)[2])
        assert entry.flag_url is None
        assert entry.location == "Atlantis"
        assert entry.fee == "1,500 CHF"

    def test_empty_row(self):
        entry = to_cost_entry(make_record())
        assert entry.name == ""
        assert entry.href is None
        assert entry.eur_per_km == "—"
        assert entry.band == "—"
        assert entry.band_class == "band-unknown"
        assert entry.start_date == ""


class TestSlugFormula:
    def test_matches_whole_list_items(self):
        assert slug_formula("utmb") == 'FIND(",utmb,", "," & ARRAYJOIN({Race Slug}, ",") & ",")'

    def test_quotes_are_escaped(self):
        formula = slug_formula('bad"slug')
        assert '",bad\\"slug,"' in formula


class TestSelectPrimary:
    def test_empty(self):
        assert select_primary([]) is None

    def test_prefers_primary_regardless_of_order(self):
        rows = [
            make_record("rec1", **{"Is Primary Distance (from Distance)": [False]}),
            make_record("rec2"),
            make_record("rec3", **{"Is Primary Distance (from Distance)": [True]}),
        ]
        assert select_primary(rows).id == "rec3"
        assert select_primary(list(reversed(rows))).id == "rec3"

    def test_falls_back_to_first(self):
        rows = [make_record("rec1"), make_record("rec2")]
        assert select_primary(rows).id == "rec1"

    @pytest.mark.parametrize("value,expected", [
        (True, True), (False, False), ([True], True), ([False], False), ([], False), (None, False), ("yes", False),
    ])
    def test_is_checked(self, value, expected):
        assert is_checked(value) is expected


class TestRaceDetail:
    def test_projection(self):
        record = make_record(
            "recBEARA",
            ID="Beara Way Ultra (IMRA) – 161 km",
            LKP_country=["Ireland"],
            LKP_region=["Cork"],
            Currency="EUR",
            **{
                "AUTO Fee used": 125,
                "AUTO €/km": 0.776,
                "AUTO Price Bands": "Less than 1",
                "Distance Start Date": "2026-06-12",
                "Featured Blurb": "Short blurb",
                "LKP_featured_image": [{"id": "att1", "url": "https://img/lkp.jpg", "filename": "lkp.jpg"}],
                "temporary_image": [{"id": "att2", "url": "https://img/tmp.jpg", "filename": "tmp.jpg"}],
                "LKP_elevation": 5200.0,
                "LKP_%increase": 32,
                "LKP_utmb": [True],
                "LKP_primaryairport": ["Cork Airport"],
                "LKP_airportcode": ["ORK"],
                "Last Checked": "2026-01-15",
            },
        )
        race = to_race_detail("beara-way-ultra", record)
        assert race.name == "Beara Way Ultra (IMRA)"
        assert race.distance == "161 km"
        assert race.location == "Ireland · Cork"
        assert race.flag_url == "https://flagcdn.com/w320/ie.png"
        assert race.date == "June 12, 2026"
        assert race.fee == "125 EUR"
        assert race.eur_per_km == "€0.78"
        assert race.series == "UTMB"
        assert race.blurb == "Short blurb"
        assert race.image_url == "https://img/lkp.jpg"
        assert race.elevation == "5200 m · 32"
        assert race.airport == "Cork Airport (ORK)"
        assert race.has_logistics
        assert race.title == "Beara Way Ultra (IMRA) | Discover Trail Races"
        assert "Beara Way Ultra (IMRA)" in race.description

    def test_sparse_row_uses_placeholders(self):
        race = to_race_detail("x", make_record(**{"Race Event": ["Solo Trail"], "AUTO Fee used": 0}))
        assert race.name == "Solo Trail"
        assert race.distance == ""
        assert race.fee == "—"
        assert race.eur_per_km == "—"
        assert race.elevation == "—"
        assert race.airport == "—"
        assert race.series == ""
        assert race.image_url is None
        assert not race.has_logistics

    @pytest.mark.parametrize("elevation,increase", [(0, 0), ([0], [0.0]), (0.0, None)])
    def test_zero_climb_reads_as_unset(self, elevation, increase):
        race = to_race_detail("x", make_record(LKP_elevation=elevation, **{"LKP_%increase": increase}))
        assert race.elevation == "—"
        assert race.pct_increase == ""

    def test_lookup_list_climb(self):
        race = to_race_detail("x", make_record(LKP_elevation=[1800.0], **{"LKP_%increase": [12]}))
        assert race.elevation == "1800 m · 12"
        assert race.pct_increase == "12"

    def test_final_blurb_and_temporary_image_fallbacks(self):
        race = to_race_detail("x", make_record(**{
            "FINAL_blurb": ["Final words"],
            "Featured Blurb": "Older words",
            "temporary_image": [{"id": "att2", "url": "https://img/tmp.jpg", "filename": "tmp.jpg"}],
        }))
        assert race.blurb == "Final words"
        assert race.image_url == "https://img/tmp.jpg"

    def test_get_race_detail_filters_by_slug(self):
        rows = [make_record("rec1", ID="Race – 20 km"), make_record("rec2", ID="Race – 50 km",
                **{"Is Primary Distance (from Distance)": True})]
        with patch("trail_costs.airtable_client.fetch_records", return_value=rows) as mock_fetch:
            race = get_race_detail("race")
        params = mock_fetch.call_args.args[1]
        assert params["filterByFormula"] == slug_formula("race")
        assert params["pageSize"] == 50
        assert race.distance == "50 km"

    def test_get_race_detail_no_rows(self):
        with patch("trail_costs.airtable_client.fetch_records", return_value=[]):
            assert get_race_detail("missing") is None
