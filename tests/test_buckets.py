from datetime import date, datetime, timedelta

from fitlog.buckets import days_between, month_id, week_id


def test_week_id_format():
    assert week_id(date(2025, 11, 17)) == "2025-W47"
    assert week_id(date(2025, 3, 3)) == "2025-W10"


def test_week_id_uses_iso_year_at_year_boundary():
    # Monday 2024-12-30 belongs to ISO week 1 of 2025
    assert week_id(date(2024, 12, 30)) == "2025-W01"
    # Friday 2021-01-01 still belongs to ISO week 53 of 2020
    assert week_id(date(2021, 1, 1)) == "2020-W53"


def test_month_id():
    assert month_id(date(2025, 1, 31)) == "2025-01"
    assert month_id(datetime(2025, 12, 1, 23, 59)) == "2025-12"


def test_ids_ignore_time_of_day():
    morning = datetime(2025, 6, 4, 0, 0, 1)
    night = datetime(2025, 6, 4, 23, 59, 59)
    assert week_id(morning) == week_id(night) == week_id(morning.date())
    assert month_id(morning) == month_id(night)


def test_dates_eight_days_apart_never_share_a_week():
    start = date(2023, 1, 1)
    for offset in range(0, 800, 3):
        d = start + timedelta(days=offset)
        assert week_id(d) != week_id(d + timedelta(days=8))


def test_days_between_discards_time():
    assert days_between(datetime(2025, 5, 1, 23, 0), datetime(2025, 5, 2, 1, 0)) == 1
    assert days_between(date(2025, 5, 1), date(2025, 5, 1)) == 0
    assert days_between(date(2025, 5, 3), date(2025, 5, 1)) == -2
