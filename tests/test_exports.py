"""
Test: CSV/JSON exports and submission history sorting.
"""
import csv
import io
from datetime import datetime, timezone

from gradeai.services.export_service import (
    submissions_csv, grading_results_csv, sort_submissions,
    user_data_export, export_filename,
)


def _sub(first, last, score, created_at, feedback=""):
    return {
        "student": {"first_name": first, "last_name": last} if first else None,
        "score": score,
        "feedback": feedback,
        "created_at": created_at,
        "submitted_at": "2025-02-01",
        "graded_at": "2025-02-02" if score is not None else None,
    }


SUBMISSIONS = [
    _sub("Maya", "Chen", 45, "2025-02-03", 'Strong "thesis", weak ending'),
    _sub("Leo", "Adams", None, "2025-02-05"),
    _sub("Ava", "Lopez", 38, "2025-02-04"),
    _sub(None, None, 20, "2025-02-01"),
]


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestSubmissionsCsv:
    def test_header_and_graded_rows_only(self):
        rows = _rows(submissions_csv(SUBMISSIONS, total_points=50))
        assert rows[0] == ["Student Name", "Score", "Percentage", "Feedback", "Submitted At", "Graded At"]
        assert [r[0] for r in rows[1:]] == ["Maya Chen", "Ava Lopez", "Unknown Student"]

    def test_percentage_of_total_points(self):
        rows = _rows(submissions_csv(SUBMISSIONS, total_points=50))
        assert rows[1][1:3] == ["45", "90%"]
        assert rows[2][2] == "76%"

    def test_default_total_points(self):
        rows = _rows(submissions_csv(SUBMISSIONS[:1], total_points=None))
        assert rows[1][2] == "45%"

    def test_quotes_escaped(self):
        text = submissions_csv(SUBMISSIONS[:1], total_points=50)
        assert '"Strong ""thesis"", weak ending"' in text
        assert _rows(text)[1][3] == 'Strong "thesis", weak ending'

    def test_data_rows_fully_quoted(self):
        line = submissions_csv(SUBMISSIONS[:1], total_points=50).splitlines()[1]
        assert line.startswith('"Maya Chen","45","90%"')


class TestGradingResultsCsv:
    def test_completed_only(self):
        results = [
            {"studentName": "Maya", "status": "completed",
             "grading": {"score": 88, "percentage": 88, "letterGrade": "B", "feedback": "Nice"}},
            {"studentName": "Leo", "status": "error", "error": "Failed"},
        ]
        rows = _rows(grading_results_csv(results))
        assert rows == [
            ["Student Name", "Score", "Percentage", "Letter Grade", "Feedback"],
            ["Maya", "88", "88%", "B", "Nice"],
        ]


class TestSortSubmissions:
    def test_date_newest_first(self):
        ordered = sort_submissions(SUBMISSIONS, "date")
        assert [s["created_at"] for s in ordered] == ["2025-02-05", "2025-02-04", "2025-02-03", "2025-02-01"]

    def test_score_highest_first(self):
        ordered = sort_submissions(SUBMISSIONS, "score")
        assert [s["score"] for s in ordered] == [45, 38, 20, None]

    def test_student_alphabetical(self):
        ordered = sort_submissions(SUBMISSIONS, "student")
        names = [(s["student"] or {}).get("first_name") for s in ordered]
        assert names == [None, "Ava", "Leo", "Maya"]

    def test_search_case_insensitive(self):
        found = sort_submissions(SUBMISSIONS, "date", search="CHEN")
        assert len(found) == 1
        assert found[0]["student"]["first_name"] == "Maya"


class TestUserDataExport:
    def test_shape(self):
        now = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)
        export = user_data_export({"display_name": "Ms. Chen"}, [{"id": "a"}], None, [], now=now)
        assert export == {
            "profile": {"display_name": "Ms. Chen"},
            "assignments": [{"id": "a"}],
            "submissions": [],
            "students": [],
            "exported_at": "2025-03-01T09:30:00+00:00",
        }

    def test_filename(self):
        now = datetime(2025, 3, 1, tzinfo=timezone.utc)
        assert export_filename(now) == "gradeai-data-export-2025-03-01.json"
