from datetime import date

from ratecompare.demo import generate_demo_records, generate_demo_weather, weekend_multiplier


def test_demo_records_shape():
    records = generate_demo_records(date(2025, 1, 1), date(2025, 1, 7), seed=1)
    assert len(records) == 7 * 96
    assert records[0].start_time == "00:00"
    assert records[0].end_time == "00:14"
    assert records[-1].start_time == "23:45"
    assert all(r.usage_kwh >= 0.01 for r in records)
    assert all(r.usage_kwh == round(r.usage_kwh, 2) for r in records)


def test_demo_records_repeatable_with_seed():
    first = generate_demo_records(date(2025, 3, 1), date(2025, 3, 2), seed=7)
    second = generate_demo_records(date(2025, 3, 1), date(2025, 3, 2), seed=7)
    assert first == second


def test_weekend_multiplier():
    assert weekend_multiplier(6, 8) == 0.6
    assert weekend_multiplier(0, 12) == 1.3
    assert weekend_multiplier(6, 20) == 1.0
    assert weekend_multiplier(3, 8) == 1.0


def test_demo_weather_is_seasonal():
    weather = generate_demo_weather(date(2025, 1, 1), date(2025, 7, 31), seed=3)
    assert len(weather) == 212
    january = [w.temp_mean for w in weather if w.date.month == 1]
    july = [w.temp_mean for w in weather if w.date.month == 7]
    assert sum(january) / len(january) < sum(july) / len(july)
    assert all(w.temp_min < w.temp_mean < w.temp_max for w in weather)
