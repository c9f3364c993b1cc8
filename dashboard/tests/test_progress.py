"""Tests for the user-progress aggregations."""

from datetime import datetime, timezone

from ..analytics.progress import (
    filter_enrollments,
    group_by_course,
    summarise_progress,
    to_row,
)
from ..models.enrollment import Enrollment
from ..models.enums import ProgressStatus, RiskLevel
from .conftest import enrollment_json

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make(*rows):
    return [Enrollment.model_validate(row) for row in rows]


ENROLLMENTS = make(
    enrollment_json("e1", "u1", "c1", progress=100, completed=True),
    enrollment_json("e2", "u2", "c1", progress=40, enrolled_at="2024-02-14T12:00:00Z"),
    enrollment_json("e3", "u1", "c2", progress=0, enrolled_at="2024-02-29T12:00:00Z"),
    enrollment_json("e4", "u3", "c2", progress=60, enrolled_at="2024-02-29T12:00:00Z"),
)


class TestFilterEnrollments:
    def test_status_filters(self):
        def ids(status):
            return [e.id for e in filter_enrollments(ENROLLMENTS, status=status)]

        assert ids(ProgressStatus.all) == ["e1", "e2", "e3", "e4"]
        assert ids(ProgressStatus.completed) == ["e1"]
        assert ids(ProgressStatus.in_progress) == ["e2", "e4"]
        assert ids(ProgressStatus.not_started) == ["e3"]

    def test_course_filter(self):
        assert [e.id for e in filter_enrollments(ENROLLMENTS, course_id="c2")] == ["e3", "e4"]
        assert len(filter_enrollments(ENROLLMENTS, course_id="all")) == 4

    def test_search_matches_user_and_course(self):
        assert [e.id for e in filter_enrollments(ENROLLMENTS, search="u2@EXAMPLE")] == ["e2"]
        assert [e.id for e in filter_enrollments(ENROLLMENTS, search="course c1")] == ["e1", "e2"]

    def test_unpopulated_rows_are_dropped(self):
        rows = make(enrollment_json("e9", user="u9"), enrollment_json("e8", course=None))
        assert filter_enrollments(rows) == []


class TestSummary:
    def test_summary_counts(self):
        summary = summarise_progress(ENROLLMENTS, now=NOW)
        assert summary.total_students == 3
        assert summary.total_courses == 2
        assert summary.completed == 1
        assert summary.high_risk == 1
        assert summary.average_progress == 50.0

    def test_average_is_rounded(self):
        rows = make(
            enrollment_json("a", progress=10),
            enrollment_json("b", progress=10),
            enrollment_json("c", progress=15),
        )
        assert summarise_progress(rows, now=NOW).average_progress == 11.7

    def test_empty(self):
        summary = summarise_progress([], now=NOW)
        assert summary.total_students == 0
        assert summary.average_progress == 0.0

    def test_camel_case_dump(self):
        dumped = summarise_progress(ENROLLMENTS, now=NOW).model_dump(by_alias=True)
        assert set(dumped) == {"totalStudents", "completed", "highRisk", "totalCourses", "averageProgress"}


def test_to_row_flattens_enrollment():
    row = to_row(ENROLLMENTS[1], now=NOW)
    assert row.user_name == "User u2"
    assert row.user_email == "u2@example.com"
    assert row.course_title == "Course c1"
    assert row.risk == RiskLevel.high


def test_group_by_course_keeps_first_seen_order():
    groups = group_by_course(ENROLLMENTS)
    assert list(groups) == ["c1", "c2"]
    assert [e.id for e in groups["c2"]] == ["e3", "e4"]
