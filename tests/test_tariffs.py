import pytest
from ratecompare.tariffs import (
    DEFAULT_RATE_TABLE,
    HourWindow,
    RateTable,
    TariffConfigError,
    TimeOfUseRate,
    load_rate_table_from_yaml,
    rate_table_as_rows,
    rate_table_from_dict,
)


def test_shipped_yaml_matches_default_table():
    assert load_rate_table_from_yaml() == DEFAULT_RATE_TABLE


def test_default_rates_are_sane():
    table = DEFAULT_RATE_TABLE
    assert table.tou.peak_rate_winter > table.tou.peak_rate_summer
    assert table.tou_super.super_off_peak_rate < table.tou.off_peak_rate
    assert table.flat.tier2_rate > table.flat.tier1_rate


def test_partial_dict_falls_back_to_defaults():
    table = rate_table_from_dict({"basic_charge": 10, "tou": {"off_peak_rate": 0.1}})
    assert table.basic_charge == 10
    assert table.tou.off_peak_rate == 0.1
    assert table.tou.peak_rate_winter == DEFAULT_RATE_TABLE.tou.peak_rate_winter
    assert table.flat == DEFAULT_RATE_TABLE.flat


def test_windows_and_winter_months_from_dict():
    table = rate_table_from_dict(
        {
            "windows": {"evening_peak": {"start": 16, "end": 21}},
            "winter_months": [11, 12, 1, 2],
        }
    )
    assert table.evening_peak == HourWindow(16, 21)
    assert table.morning_peak == DEFAULT_RATE_TABLE.morning_peak
    assert table.winter_months == frozenset({11, 12, 1, 2})


def test_unknown_rate_key():
    with pytest.raises(TariffConfigError, match="Unknown rate key"):
        rate_table_from_dict({"flat": {"tier3_rate": 0.3}})


def test_negative_rate_rejected():
    with pytest.raises(TariffConfigError, match="tou.off_peak_rate"):
        RateTable(tou=TimeOfUseRate(off_peak_rate=-0.01))


def test_tier2_below_tier1_rejected():
    with pytest.raises(TariffConfigError):
        rate_table_from_dict({"flat": {"tier1_rate": 0.3, "tier2_rate": 0.2}})


def test_bad_month_and_window_rejected():
    with pytest.raises(TariffConfigError, match="winter_months"):
        rate_table_from_dict({"winter_months": [0, 13]})
    with pytest.raises(TariffConfigError, match="morning_peak"):
        rate_table_from_dict({"windows": {"morning_peak": {"start": 25, "end": 3}}})


def test_nan_rate_rejected():
    with pytest.raises(TariffConfigError, match="finite"):
        rate_table_from_dict({"tou": {"peak_rate_summer": float("nan")}})
    with pytest.raises(TariffConfigError, match="finite"):
        rate_table_from_dict({"flat": {"tier1_rate": "cheap"}})


def test_null_sections_fall_back_to_defaults(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text("basic_charge: 8.0\nflat:\ntou:\nwindows:\nwinter_months:\n")
    table = load_rate_table_from_yaml(path)
    assert table.basic_charge == 8.0
    assert table.flat == DEFAULT_RATE_TABLE.flat
    assert table.morning_peak == DEFAULT_RATE_TABLE.morning_peak
    assert table.winter_months == DEFAULT_RATE_TABLE.winter_months


@pytest.mark.parametrize(
    "data, message",
    [
        ({"windows": 5}, "windows must be a mapping"),
        ({"flat": [0.1, 0.2]}, "flat must be a mapping"),
        ({"windows": {"evening_peak": {"start": 17}}}, "start and end"),
        ({"windows": {"evening_peak": {"start": "five", "end": 20}}}, "start and end"),
        ({"winter_months": 12}, "Invalid rate table value"),
        ({"basic_charge": "free"}, "Invalid rate table value"),
    ],
)
def test_malformed_sections_rejected(data, message):
    with pytest.raises(TariffConfigError, match=message):
        rate_table_from_dict(data)


def test_load_custom_yaml(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text(
        "rate_table:\n"
        "  name: Test Utility\n"
        "  effective_date: '2027-01'\n"
        "  basic_charge: 9.0\n"
        "  flat:\n"
        "    tier1_rate: 0.2\n"
        "    tier2_rate: 0.25\n"
    )
    table = load_rate_table_from_yaml(path)
    assert table.name == "Test Utility"
    assert table.effective_date == "2027-01"
    assert table.flat.tier1_rate == 0.2


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(TariffConfigError, match="mapping"):
        load_rate_table_from_yaml(path)


def test_rate_table_rows():
    rows = rate_table_as_rows(DEFAULT_RATE_TABLE)
    assert len(rows) == 4
    assert rows[-1][0] == "Basic charge"
    assert rows[-1][1] == "$7.49/mo"
