import asyncio
from datetime import date, datetime, timedelta, timezone
import httpx
import pytest
from pydantic import ValidationError
from gitscope.models.github import ActivityDay, ActivitySeries
from gitscope.probes.activity import build_series, count_events_by_date, truncate_to_date
from gitscope.probes.github import GithubProbe

TODAY = date(2026, 10, 18)


def expected_dates(today=TODAY):
    return [today - timedelta(days=offset) for offset in range(364, -1, -1)]


def test_truncate_keeps_timestamp_date_without_conversion():
    assert truncate_to_date("2024-03-01T23:59:59Z") == date(2024, 3, 1)
    assert truncate_to_date("2024-03-01T23:59:59-08:00") == date(2024, 3, 1)
    assert truncate_to_date("2024-03-01") == date(2024, 3, 1)
    assert truncate_to_date(datetime(2024, 3, 1, 23, 0, tzinfo=timezone(timedelta(hours=-8)))) == date(2024, 3, 1)


@pytest.mark.parametrize("value", [None, "", "yesterday", 1700000000, "2024-13-01T00:00:00Z"])
def test_truncate_rejects_unusable_values(value):
    assert truncate_to_date(value) is None


def test_count_events_skips_missing_timestamps():
    events = [
        {"created_at": "2026-10-17T01:00:00Z"},
        {"created_at": "2026-10-17T22:00:00Z"},
        {"created_at": None},
        {"type": "PushEvent"},
        "not-an-event",
    ]
    assert count_events_by_date(events) == {date(2026, 10, 17): 2}


def test_build_series_is_dense_and_ascending():
    series = build_series({date(2026, 1, 1): 4}, TODAY)
    assert [d.date for d in series.days] == expected_dates()
    assert series.start == date(2025, 10, 19)
    assert series.end == TODAY
    assert series.total_contributions == 4
    assert not series.degraded


def test_build_series_ignores_dates_outside_window():
    series = build_series({TODAY + timedelta(days=1): 3, TODAY - timedelta(days=365): 7}, TODAY)
    assert series.total_contributions == 0


def test_series_rejects_gaps():
    days = [ActivityDay(date=d) for d in expected_dates()]
    days[100] = ActivityDay(date=days[99].date)
    with pytest.raises(ValidationError):
        ActivitySeries(days=days)


def test_series_rejects_wrong_length():
    with pytest.raises(ValidationError):
        ActivitySeries(days=[ActivityDay(date=TODAY)])


def test_streaks():
    counts = {TODAY: 1, TODAY - timedelta(days=1): 2, TODAY - timedelta(days=10): 1,
              TODAY - timedelta(days=11): 1, TODAY - timedelta(days=12): 5}
    series = build_series(counts, TODAY)
    assert series.current_streak == 2
    assert series.longest_streak == 3
    assert series.active_days == 5
    assert series.max_contributions == 5


def test_fetch_activity_folds_events(make_probe):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[
            {"type": "PushEvent", "created_at": "2026-10-18T03:00:00Z"},
            {"type": "WatchEvent", "created_at": "2026-10-18T21:00:00Z"},
            {"type": "IssuesEvent", "created_at": "2026-09-30T10:00:00Z"},
        ])

    series = asyncio.run(make_probe(handler).fetch_activity("octocat"))

    assert seen["path"] == "/users/octocat/events/public"
    assert seen["params"] == {"per_page": "100"}
    counts = {d.date: d.contributions for d in series.days}
    assert counts[TODAY] == 2
    assert counts[date(2026, 9, 30)] == 1
    assert series.total_contributions == 3


def test_hundred_events_on_one_day(make_probe):
    day = date(2026, 6, 1)
    events = [{"created_at": f"2026-06-01T{h % 24:02d}:00:00Z"} for h in range(100)]
    handler = lambda request: httpx.Response(200, json=events)

    series = asyncio.run(make_probe(handler).fetch_activity("octocat"))

    assert len(series.days) == 365
    assert [d.date for d in series.days] == expected_dates()
    for entry in series.days:
        assert entry.contributions == (100 if entry.date == day else 0)


def test_no_events_gives_zero_series(make_probe):
    handler = lambda request: httpx.Response(200, json=[])

    series = asyncio.run(make_probe(handler).fetch_activity("octocat"))
    assert [d.date for d in series.days] == expected_dates()
    assert series.total_contributions == 0
    assert not series.degraded


def test_network_failure_gives_zero_series(make_probe):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    series = asyncio.run(make_probe(handler).fetch_activity("octocat"))
    assert [d.date for d in series.days] == expected_dates()
    assert series.total_contributions == 0
    assert series.degraded


def test_unbuildable_url_gives_zero_series():
    probe = GithubProbe(base_url="https://api.github.com/\x00", clock=lambda: TODAY)

    series = asyncio.run(probe.fetch_activity("octocat"))
    assert [d.date for d in series.days] == expected_dates()
    assert series.degraded


def test_control_character_username_gives_series(make_probe):
    seen = {}

    def handler(request):
        seen["raw_path"] = request.url.raw_path
        return httpx.Response(404)

    series = asyncio.run(make_probe(handler).fetch_activity("octo\x00cat"))
    assert seen["raw_path"] == b"/users/octo%00cat/events/public?per_page=100"
    assert len(series.days) == 365
    assert series.degraded


@pytest.mark.parametrize("response", [
    httpx.Response(404),
    httpx.Response(403),
    httpx.Response(200, json={"message": "odd"}),
    httpx.Response(200, content=b"not json"),
])
def test_failed_or_malformed_events_degrade(make_probe, response):
    handler = lambda request: response

    series = asyncio.run(make_probe(handler).fetch_activity("octocat"))
    assert len(series.days) == 365
    assert series.end == TODAY
    assert series.degraded


def test_same_day_calls_share_dates(make_probe):
    responses = iter([
        httpx.Response(200, json=[{"created_at": "2026-10-18T01:00:00Z"}]),
        httpx.Response(200, json=[{"created_at": "2026-10-18T01:00:00Z"}, {"created_at": "2026-10-18T02:00:00Z"}]),
    ])
    probe = make_probe(lambda request: next(responses))

    first = asyncio.run(probe.fetch_activity("octocat"))
    second = asyncio.run(probe.fetch_activity("octocat"))
    assert [d.date for d in first.days] == [d.date for d in second.days]
    assert first.days[-1].contributions == 1
    assert second.days[-1].contributions == 2
