import pytest
from loguru import logger

from dcm.config import DashboardConfig
from dcm.engine import Aggregator

DISASTER_ROWS = [
    {"Country": "Testland", "ISO2": "TL", "ISO3": "TST", "Indicator": "Number of Disasters: Flood",
     "Unit": "Number", "Source": "EM-DAT", "1990": "2", "1991": "x", "1992": "4"},
    {"Country": "Testland", "ISO2": "TL", "ISO3": "TST", "Indicator": "Number of Disasters: Storm",
     "Unit": "Number", "Source": "EM-DAT", "1990": "1", "1991": "", "1992": "1"},
    {"Country": "Otherland", "ISO2": "OL", "ISO3": "OTH", "Indicator": "Number of Disasters: Flood",
     "Unit": "Number", "Source": "EM-DAT", "1990": "10", "1991": "0", "1992": "0"},
    {"Country": "Dryland", "ISO2": "DL", "ISO3": "DRY", "Indicator": "Number of Disasters: Drought",
     "Unit": "Number", "Source": "EM-DAT", "1990": "3", "1991": "3", "1992": "3"},
]

CARBON_ROWS = [
    {"Country": "Testland", "ISO2": "TL", "ISO3": "TST", "Indicator": "Carbon stocks in forests",
     "Unit": "Million tonnes", "Source": "FAO", "1991": "100", "1992": "200"},
    {"Country": "Testland", "ISO2": "TL", "ISO3": "TST", "Indicator": "Land area",
     "Unit": "1000 HA", "Source": "FAO", "1991": "50", "1992": "50"},
    {"Country": "Testland", "ISO2": "TL", "ISO3": "TST", "Indicator": "Index of forest extent",
     "Unit": "Index", "Source": "FAO", "1991": "99", "1992": "98"},
    {"Country": "Otherland", "ISO2": "OL", "ISO3": "OTH", "Indicator": "Carbon stocks in forests",
     "Unit": "Million tonnes", "Source": "FAO", "1991": "400", "1992": "600"},
    {"Country": "Otherland", "ISO2": "OL", "ISO3": "OTH", "Indicator": "Land area",
     "Unit": "1000 HA", "Source": "FAO", "1991": "0", "1992": "0"},
]


@pytest.fixture
def disaster_rows():
    return [dict(r) for r in DISASTER_ROWS]


@pytest.fixture
def carbon_rows():
    return [dict(r) for r in CARBON_ROWS]


@pytest.fixture
def config():
    return DashboardConfig(disaster_path=None, carbon_path=None, year_low=1990, year_high=1992, area_scale_factor=100.0)


@pytest.fixture
def engine(config, disaster_rows, carbon_rows):
    agg = Aggregator(config=config)
    agg.reload(disaster_rows, carbon_rows)
    return agg


@pytest.fixture
def log_messages():
    """Collect loguru records at WARNING and above."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def write_csv(tmp_path):
    def _write(name, rows):
        import csv
        path = tmp_path / name
        cols = list(rows[0].keys())
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=cols)
            w.writeheader()
            for r in rows:
                w.writerow(r)
        return str(path)
    return _write
