import pytest
from ratecompare import config
from ratecompare.tariffs import DEFAULT_RATE_TABLE


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RATECOMPARE_TARIFFS", "RATECOMPARE_ZIP", "RATECOMPARE_ANOMALY_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert config.get_tariffs_path() is None
    assert config.get_default_zip() is None
    assert config.get_anomaly_threshold() == 2.5
    assert config.load_rate_table() is DEFAULT_RATE_TABLE


def test_anomaly_threshold_from_env(monkeypatch):
    monkeypatch.setenv("RATECOMPARE_ANOMALY_THRESHOLD", "3")
    assert config.analysis_config_from_env().anomaly_threshold == 3.0


def test_bad_anomaly_threshold(monkeypatch):
    monkeypatch.setenv("RATECOMPARE_ANOMALY_THRESHOLD", "lots")
    with pytest.raises(ValueError, match="must be a number"):
        config.get_anomaly_threshold()


def test_tariffs_path_from_env(monkeypatch, tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text("basic_charge: 9.99\n")
    monkeypatch.setenv("RATECOMPARE_TARIFFS", str(path))
    assert config.load_rate_table().basic_charge == 9.99


def test_zip_from_env(monkeypatch):
    monkeypatch.setenv("RATECOMPARE_ZIP", "98052")
    assert config.get_default_zip() == "98052"
