from datetime import date

from depot_cart.services.schedule import (
    format_delivery_date,
    parse_weekday,
    resolve_delivery_dates,
)

WEDNESDAY = date(2026, 10, 21)


def test_one_date_per_weekday_sorted() -> None:
    schedule = resolve_delivery_dates(["thursday", "monday"], today=WEDNESDAY)

    assert [opt.delivery_date for opt in schedule.dates] == [date(2026, 10, 22), date(2026, 10, 26)]
    assert [opt.weekday for opt in schedule.dates] == ["thursday", "monday"]
    assert schedule.by_weekday == {
        "thursday": [date(2026, 10, 22)],
        "monday": [date(2026, 10, 26)],
    }


def test_scan_starts_tomorrow() -> None:
    schedule = resolve_delivery_dates(["wednesday"], today=WEDNESDAY)

    assert [opt.delivery_date for opt in schedule.dates] == [date(2026, 10, 28)]


def test_first_n_per_weekday() -> None:
    schedule = resolve_delivery_dates(
        ["monday"], today=WEDNESDAY, lookahead_days=28, per_weekday=4
    )

    assert schedule.by_weekday["monday"] == [
        date(2026, 10, 26),
        date(2026, 11, 2),
        date(2026, 11, 9),
        date(2026, 11, 16),
    ]


def test_lookahead_bounds_the_scan() -> None:
    schedule = resolve_delivery_dates(
        ["monday"], today=WEDNESDAY, lookahead_days=14, per_weekday=4
    )

    assert schedule.by_weekday["monday"] == [date(2026, 10, 26), date(2026, 11, 2)]


def test_empty_schedule_is_unspecified() -> None:
    schedule = resolve_delivery_dates([], today=WEDNESDAY)

    assert schedule.dates == []
    assert schedule.by_weekday == {}
    assert not schedule.is_specified


def test_names_are_case_insensitive_and_unknown_names_ignored() -> None:
    schedule = resolve_delivery_dates(["MONDAY", "Thu", "someday", "monday"], today=WEDNESDAY)

    assert [opt.weekday for opt in schedule.dates] == ["thursday", "monday"]


def test_only_unknown_names_gives_empty_schedule() -> None:
    assert resolve_delivery_dates(["funday"], today=WEDNESDAY).dates == []


def test_parse_weekday() -> None:
    assert parse_weekday("monday") == 0
    assert parse_weekday(" Sun ") == 6
    assert parse_weekday("nope") is None


def test_format_delivery_date() -> None:
    assert format_delivery_date(date(2026, 10, 22)) == "Thu, Oct 22, 2026"
