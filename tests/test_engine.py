import csv
import json

import pytest

from dcm.engine import Aggregator
from dcm.loader import DataLoadError
from dcm.models import Dataset, YearValue


def test_reload_builds_both_collections(engine):
    ds = engine.dataset
    assert [r.iso3 for r in ds.disasters] == ["TST", "OTH", "DRY"]
    assert [r.iso3 for r in ds.carbon] == ["TST", "OTH"]
    assert ds.series("disasters", "TST", "Flood").yearly_values == (
        YearValue(1990, 2.0), YearValue(1991, 0.0), YearValue(1992, 4.0),
    )
    assert ds.series("carbon", "OTH", "Share of forest area").yearly_values == ()
    assert ds.series("carbon", "DRY", "Land area") is None


def test_reload_is_idempotent(config, disaster_rows, carbon_rows):
    agg = Aggregator(config=config)
    first = agg.reload(disaster_rows, carbon_rows)
    second = agg.reload(disaster_rows, carbon_rows)
    assert first == second
    assert first is not second


def test_failed_reload_keeps_previous_dataset(engine, disaster_rows):
    before = engine.dataset
    with pytest.raises(DataLoadError):
        engine.reload(disaster_rows, None)
    with pytest.raises(DataLoadError):
        engine.reload(None, disaster_rows)
    with pytest.raises(DataLoadError):
        engine.reload(disaster_rows, ["not a row"])
    assert engine.dataset is before


def test_reload_from_files(config, write_csv, disaster_rows, carbon_rows):
    agg = Aggregator(config=config)
    ds = agg.reload_from_files(write_csv("d.csv", disaster_rows), write_csv("c.csv", carbon_rows))
    assert len(ds.disasters) == 3
    assert ds.series("disasters", "TST", "Flood").yearly_values[1] == YearValue(1991, 0.0)


def test_reload_from_files_fetch_failure_keeps_previous(engine, write_csv, disaster_rows, tmp_path):
    before = engine.dataset
    with pytest.raises(DataLoadError):
        engine.reload_from_files(write_csv("d.csv", disaster_rows), str(tmp_path / "missing.csv"))
    assert engine.dataset is before


def test_empty_aggregator_has_empty_dataset():
    assert Aggregator().dataset == Dataset()


def test_summary_rows(engine):
    rows = {r["iso3"]: r for r in engine.summary_rows()}
    assert rows["TST"]["disasters_total"] == 8
    assert rows["TST"]["carbon_stock_mean"] == 150
    assert rows["TST"]["land_area"] == 50
    assert rows["DRY"]["carbon_stock_mean"] is None


def test_export_csv_and_json(engine, tmp_path):
    engine.state.add_highlighted_country("TST")
    engine.state.set_selected_countries(["OTH"])
    csv_path = tmp_path / "out.csv"
    json_path = tmp_path / "out.json"
    engine.export_csv(str(csv_path))
    engine.export_json(str(json_path))

    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["iso3"] for r in rows] == ["TST", "OTH"]

    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["year_range"] == [1990, 1992]
    assert payload["highlighted_countries"] == ["TST"]
    assert [c["iso3"] for c in payload["countries"]] == ["TST", "OTH"]


def test_reload_accepts_integer_year_columns(config):
    agg = Aggregator(config=config)
    rows = [{"Country": "Test", "ISO3": "TST", "Indicator": "Number of Floods", 1990: "2", 1991: "x"}]
    ds = agg.reload(rows, [])
    assert ds.series("disasters", "TST", "Flood").yearly_values == (YearValue(1990, 2.0), YearValue(1991, 0.0))
    assert ds.series("disasters", "TST", "Wildfire").yearly_values == ()
