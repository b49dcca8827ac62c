"""
Tests for the urgency classifier and due labels.
"""

from datetime import timedelta

import pytest

from job_pipeline.classification.urgency import (
    Urgency,
    due_time_for,
    format_due_label,
    format_due_time,
    get_urgency,
)


class TestGetUrgency:
    """Tier boundaries, first match wins."""

    @pytest.mark.parametrize(
        'diff,expected',
        [
            (timedelta(minutes=-5), Urgency.OVERDUE),
            (timedelta(0), Urgency.OVERDUE),
            (timedelta(seconds=1), Urgency.CRITICAL),
            (timedelta(hours=1), Urgency.CRITICAL),
            (timedelta(hours=1, seconds=1), Urgency.WARNING),
            (timedelta(hours=4), Urgency.WARNING),
            (timedelta(hours=24), Urgency.SOON),
            (timedelta(hours=48), Urgency.TOMORROW),
            (timedelta(days=7), Urgency.UPCOMING),
            (timedelta(days=7, seconds=1), Urgency.LATER),
        ],
    )
    def test_boundaries(self, diff, expected):
        assert get_urgency(diff) is expected

    def test_severity_is_monotonic_as_due_approaches(self):
        """Moving the due instant closer never lowers urgency."""
        diffs = [timedelta(minutes=m) for m in range(60 * 24 * 10, -60, -15)]
        severities = [get_urgency(d).severity for d in diffs]
        assert severities == sorted(severities)

    def test_none_is_below_every_dated_tier(self):
        dated = [u for u in Urgency if u is not Urgency.NONE]
        assert all(Urgency.NONE.severity < u.severity for u in dated)


class TestDueLabel:
    @pytest.mark.parametrize(
        'diff,label',
        [
            (timedelta(minutes=-30), '30m overdue'),
            (timedelta(hours=-3), '3h overdue'),
            (timedelta(days=-2), '2d overdue'),
            (timedelta(days=-21), '3w overdue'),
            (timedelta(days=-90), '3mo overdue'),
            (timedelta(seconds=30), '1m left'),
            (timedelta(minutes=45), '45m left'),
            (timedelta(minutes=90), '1h 30m left'),
            (timedelta(hours=1), '1h left'),
            (timedelta(hours=3), '3h left'),
            (timedelta(hours=30), 'due tomorrow'),
            (timedelta(days=3), 'due in 3 days'),
            (timedelta(days=8), 'due in 1 week'),
            (timedelta(days=20), 'due in 2 weeks'),
            (timedelta(days=65), 'due in 2 months'),
        ],
    )
    def test_labels(self, diff, label):
        assert format_due_label(diff) == label

    def test_deterministic_for_fixed_instants(self, now):
        due = now + timedelta(hours=3)
        assert format_due_time(due, now) == format_due_time(due, now)
        assert format_due_time(due, now).label == '3h left'
        assert format_due_time(due, now).urgency is Urgency.WARNING


class TestDueTimeFor:
    def test_missing_due_date(self, now):
        due = due_time_for(None, now)
        assert due.urgency is Urgency.NONE
        assert due.label == 'No date set'
        assert due.to_dict() == {'label': 'No date set', 'urgency': 'none'}

    def test_past_due_is_overdue_not_none(self, now):
        assert due_time_for(now - timedelta(days=1), now).urgency is Urgency.OVERDUE
