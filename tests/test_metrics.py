import math

from dcm.metrics import (
    SKIP,
    combine_series,
    latest_value,
    mean_indicator_over_range,
    mean_or_none_over_range,
    normalize_by_area,
    sum_indicator,
)
from dcm.models import IndicatorSeries, YearValue


def _series(*pairs):
    return IndicatorSeries(type="T", yearly_values=tuple(YearValue(y, v) for y, v in pairs))


def test_sum_indicator():
    assert sum_indicator(_series()) == 0
    assert sum_indicator(_series((2000, 5), (2001, 3))) == 8


def test_mean_over_range():
    s = _series((1990, 10), (2000, 20), (2010, 30))
    assert mean_indicator_over_range(s, 1995, 2010) == 25
    assert mean_indicator_over_range(s, 2011, 2020) == 0
    assert mean_indicator_over_range(_series(), 1990, 2020) == 0


def test_mean_or_none_distinguishes_no_data():
    s = _series((1990, 0))
    assert mean_or_none_over_range(s, 1990, 1990) == 0
    assert mean_or_none_over_range(s, 2000, 2001) is None


def test_mean_over_inverted_range_is_zero():
    s = _series((2000, 1))
    assert mean_indicator_over_range(s, 2010, 2000) == 0
    assert mean_or_none_over_range(s, 2010, 2000) is None


def test_latest_value():
    assert latest_value(_series((2001, 7), (2000, 3))) == 7
    assert latest_value(_series((2000, 3), (2001, math.nan))) == 3
    assert latest_value(_series()) is None
    assert latest_value(_series(), default=-100) == -100


def test_normalize_by_area():
    assert normalize_by_area(50, 0, 100) is SKIP
    assert normalize_by_area(50, None, 100) is SKIP
    assert normalize_by_area(50, math.nan, 100) is SKIP
    assert normalize_by_area(50, 25, 100) == 200


def test_combine_series_sums_by_year():
    a = _series((2000, 1), (2001, 2))
    b = _series((2001, 3), (2002, 4))
    out = combine_series([a, b], "Both")
    assert out.type == "Both"
    assert out.yearly_values == (YearValue(2000, 1), YearValue(2001, 5), YearValue(2002, 4))


def test_helpers_do_not_mutate():
    s = _series((2000, 1), (2001, 2))
    before = s.yearly_values
    sum_indicator(s)
    mean_indicator_over_range(s, 2000, 2001)
    latest_value(s)
    assert s.yearly_values == before
