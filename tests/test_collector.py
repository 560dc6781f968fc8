from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from kodo.models import CommitRecord
from kodo.stats import (
    DateRange,
    Period,
    PeriodBucket,
    aggregate_by_month,
    aggregate_by_week,
    aggregate_by_year,
    collect_stats,
    effective_diff,
)

from conftest import make_commit


def test_daily_stats_fill_every_day_and_sum_totals(sample_result) -> None:
    assert len(sample_result.stats) == 7
    assert sum(1 for bucket in sample_result.stats if bucket.commits == 0) == 5

    total = sample_result.total
    assert total.commits == 3
    assert total.additions == 180
    assert total.deletions == 18
    assert total.net_lines == 162

    first = sample_result.stats[0]
    assert first.label == "2024-01-01"
    assert (first.commits, first.additions, first.deletions, first.net_lines) == (2, 150, 15, 135)


def test_zero_commits_still_produce_one_row_per_day() -> None:
    range_ = DateRange(date(2024, 2, 25), date(2024, 3, 5))

    result = collect_stats("empty", [], range_, Period.DAILY)

    assert len(result.stats) == len(range_) == 10
    assert [bucket.date for bucket in result.stats] == list(range_)
    assert result.total.commits == 0
    assert all(bucket.net_lines == 0 for bucket in result.stats)


def test_rows_are_sorted_regardless_of_commit_order(first_week) -> None:
    commits = [
        make_commit("2024-01-05T08:00:00", 1, 0),
        make_commit("2024-01-02T08:00:00", 2, 0),
        make_commit("2024-01-04T08:00:00", 3, 0),
    ]

    forward = collect_stats("repo", commits, first_week, Period.DAILY)
    backward = collect_stats("repo", list(reversed(commits)), first_week, Period.DAILY)

    dates = [bucket.date for bucket in forward.stats]
    assert dates == sorted(dates)
    assert [b.to_dict() for b in forward.stats] == [b.to_dict() for b in backward.stats]


def test_commits_are_bucketed_by_utc_date(first_week) -> None:
    late_evening = datetime(2024, 1, 2, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    commit = CommitRecord(id="a", timestamp=late_evening, is_merge=False, diff=make_commit("2024-01-01").diff)

    result = collect_stats("repo", [commit], first_week, Period.DAILY)

    by_day = {bucket.date: bucket.commits for bucket in result.stats}
    assert by_day[date(2024, 1, 3)] == 1
    assert by_day[date(2024, 1, 2)] == 0


def test_extension_filter_counts_only_matching_files(first_week) -> None:
    commit = make_commit(
        "2024-01-03T12:00:00",
        files=[("src/main.rs", 40, 4), ("web/app.ts", 10, 1), ("README.md", 5, 0)],
    )

    result = collect_stats("repo", [commit], first_week, Period.DAILY, extensions=["rs", "ts"])

    assert result.total.commits == 1
    assert result.total.additions == 50
    assert result.total.deletions == 5
    assert result.total.files_changed == 2


def test_extension_filter_to_a_single_extension(first_week) -> None:
    commit = make_commit(
        "2024-01-03T12:00:00",
        files=[("src/main.rs", 40, 4), ("web/app.ts", 10, 1), ("README.md", 5, 0)],
    )

    result = collect_stats("repo", [commit], first_week, Period.DAILY, extensions=["rs"])

    assert result.total.files_changed == 1
    assert (result.total.additions, result.total.deletions) == (40, 4)


def test_extension_filter_is_case_sensitive_and_ignores_extensionless_files() -> None:
    commit = make_commit(
        "2024-01-03T12:00:00",
        files=[("Main.RS", 7, 0), ("Makefile", 3, 0), ("dir.v2/notes", 1, 1)],
    )

    assert effective_diff(commit, ["rs"]) == (0, 0, 0)
    assert effective_diff(commit, ["RS"]) == (7, 0, 1)
    assert effective_diff(commit, ["v2/notes"]) == (0, 0, 0)


def test_commit_with_no_matching_files_still_counts_as_commit(first_week) -> None:
    commit = make_commit("2024-01-03T12:00:00", files=[("README.md", 5, 1)])

    result = collect_stats("repo", [commit], first_week, Period.DAILY, extensions=["py"])

    assert result.total.commits == 1
    assert result.total.additions == 0
    assert result.total.files_changed == 0


def test_monthly_rollup_labels_and_anchor() -> None:
    daily = [PeriodBucket.for_day(date(2024, 2, 15)), PeriodBucket.for_day(date(2024, 1, 15))]
    daily[0].add_commit(3, 1, 1)
    daily[1].add_commit(5, 2, 2)

    monthly = aggregate_by_month(daily)

    assert [bucket.label for bucket in monthly] == ["2024-01", "2024-02"]
    assert monthly[0].date == date(2024, 1, 15)
    assert monthly[1].net_lines == 2


def test_weekly_labels_use_iso_week_year() -> None:
    days = [PeriodBucket.for_day(date(2024, 12, 29)), PeriodBucket.for_day(date(2024, 12, 30))]

    weekly = aggregate_by_week(days)

    assert [bucket.label for bucket in weekly] == ["2024-W52", "2025-W01"]


def test_weekly_anchor_is_earliest_member() -> None:
    range_ = DateRange(date(2024, 1, 3), date(2024, 1, 16))

    result = collect_stats("repo", [], range_, Period.WEEKLY)

    assert [bucket.label for bucket in result.stats] == ["2024-W01", "2024-W02", "2024-W03"]
    assert [bucket.date for bucket in result.stats] == [date(2024, 1, 3), date(2024, 1, 8), date(2024, 1, 15)]


def test_rollups_conserve_totals() -> None:
    range_ = DateRange(date(2023, 11, 20), date(2024, 2, 10))
    commits = [
        make_commit("2023-11-21T10:00:00", 10, 2, commit_id="a"),
        make_commit("2023-12-31T23:59:00", 4, 9, commit_id="b"),
        make_commit("2024-01-01T00:01:00", 7, 0, commit_id="c"),
        make_commit("2024-02-10T18:00:00", 1, 1, commit_id="d"),
    ]

    daily = collect_stats("repo", commits, range_, Period.DAILY)
    for period in (Period.WEEKLY, Period.MONTHLY, Period.YEARLY):
        rolled = collect_stats("repo", commits, range_, period)
        assert rolled.total.to_dict() == daily.total.to_dict()
        assert len(rolled.stats) < len(daily.stats)

    yearly = aggregate_by_year(daily.stats)
    assert [bucket.label for bucket in yearly] == ["2023", "2024"]
    assert yearly[0].additions == 14
    assert yearly[1].net_lines == 7


def test_merge_commits_are_counted_when_passed_in(first_week) -> None:
    merge = make_commit("2024-01-04T12:00:00", 5, 5, is_merge=True)

    result = collect_stats("repo", [merge], first_week, Period.DAILY)

    assert result.total.commits == 1


def test_result_serialises_range_and_period(sample_result) -> None:
    payload = sample_result.to_dict()

    assert payload["repository"] == "demo"
    assert payload["period"] == "daily"
    assert payload["from"] == "2024-01-01"
    assert payload["to"] == "2024-01-07"
    assert payload["total"]["net_lines"] == 162
