"""Tests for the aggregation engine."""

from datetime import date, datetime, timedelta

import pytest

from applytrack.core.analytics import compute_stats, count_recent, top_companies
from applytrack.core.applications import ApplicationRecord, Status
from applytrack.core.listing import filter_and_sort


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 14, 30)


def make(company: str, status: Status, applied: date, id: str | None = None) -> ApplicationRecord:
    return ApplicationRecord(
        id=id or f"{company}-{status.value}-{applied.isoformat()}",
        company=company,
        role="Engineer",
        status=status,
        applied_date=applied,
    )


@pytest.fixture
def records(now):
    today = now.date()
    return [
        make("Acme", Status.APPLIED, today - timedelta(days=2)),
        make("Acme", Status.INTERVIEW, today - timedelta(days=10)),
        make("Globex", Status.OFFER, today - timedelta(days=40)),
        make("Initech", Status.REJECTED, today - timedelta(days=5)),
        make("Globex", Status.ACCEPTED, today - timedelta(days=60)),
        make("Umbrella", Status.APPLIED, today - timedelta(days=30)),
        make("Hooli", Status.REJECTED, today - timedelta(days=31)),
        make("Stark", Status.INTERVIEW, today),
    ]


class TestComputeStats:
    def test_empty_collection(self, now):
        stats = compute_stats([], now)
        assert stats.total == 0
        assert stats.status_counts == {}
        assert stats.conversion_rate == 0
        assert stats.success_rate == 0
        assert stats.rejection_rate == 0
        assert stats.recent_count == 0
        assert stats.avg_per_week == 0
        assert stats.top_companies == []

    def test_total_and_counts(self, records, now):
        stats = compute_stats(records, now)
        assert stats.total == 8
        assert stats.status_counts == {
            Status.APPLIED: 2,
            Status.INTERVIEW: 2,
            Status.OFFER: 1,
            Status.REJECTED: 2,
            Status.ACCEPTED: 1,
        }
        assert sum(stats.status_counts.values()) == stats.total

    def test_missing_statuses_absent(self, now):
        stats = compute_stats([make("Acme", Status.APPLIED, now.date())], now)
        assert Status.OFFER not in stats.status_counts
        assert stats.count(Status.OFFER) == 0

    def test_rates(self, records, now):
        stats = compute_stats(records, now)
        assert stats.conversion_rate == pytest.approx(25.0)
        assert stats.success_rate == pytest.approx(25.0)
        assert stats.rejection_rate == pytest.approx(25.0)

    def test_rates_bounded(self, records, now):
        stats = compute_stats(records, now)
        for rate in (stats.conversion_rate, stats.success_rate, stats.rejection_rate):
            assert 0 <= rate <= 100

    def test_recent_count_is_inclusive_of_cutoff(self, records, now):
        # 0, 2, 5, 10 and exactly 30 days ago; 31+ days excluded
        assert compute_stats(records, now).recent_count == 5

    def test_avg_per_week_divides_by_four(self, records, now):
        assert compute_stats(records, now).avg_per_week == pytest.approx(5 / 4)

    def test_filtered_by_status_counts_only_that_status(self, records, now):
        rejected = filter_and_sort(records, status="Rejected")
        stats = compute_stats(rejected, now)
        assert stats.status_counts == {Status.REJECTED: stats.total}
        assert stats.rejection_rate == 100

    def test_to_dict(self, records, now):
        data = compute_stats(records, now).to_dict()
        assert data["total"] == 8
        assert data["statusCounts"]["Applied"] == 2
        assert data["topCompanies"][0] == ["Acme", 2]


class TestTopCompanies:
    def test_sorted_by_count(self, records):
        ranked = top_companies(records)
        counts = [n for _, n in ranked]
        assert counts == sorted(counts, reverse=True)
        assert ranked[:2] == [("Acme", 2), ("Globex", 2)]

    def test_limited_to_five(self, records):
        assert len(top_companies(records)) == 5

    def test_ties_keep_encounter_order(self, now):
        today = now.date()
        recs = [
            make("Zeta", Status.APPLIED, today, id="1"),
            make("Alpha", Status.APPLIED, today, id="2"),
            make("Mid", Status.APPLIED, today, id="3"),
            make("Mid", Status.APPLIED, today, id="4"),
        ]
        assert top_companies(recs) == [("Mid", 2), ("Zeta", 1), ("Alpha", 1)]

    def test_exact_name_grouping(self, now):
        today = now.date()
        recs = [make("Acme", Status.APPLIED, today, id="1"), make("acme", Status.APPLIED, today, id="2")]
        assert top_companies(recs) == [("Acme", 1), ("acme", 1)]


class TestCountRecent:
    def test_custom_window(self, records, now):
        assert count_recent(records, days=7, as_of=now) == 3
