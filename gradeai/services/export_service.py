"""
CSV and JSON exports for submissions, bulk grading results and account data.
"""
import csv
import io
from datetime import datetime, timezone

from ..config import DEFAULT_TOTAL_POINTS

SUBMISSION_HEADERS = ['Student Name', 'Score', 'Percentage', 'Feedback', 'Submitted At', 'Graded At']
GRADING_RESULT_HEADERS = ['Student Name', 'Score', 'Percentage', 'Letter Grade', 'Feedback']


def student_display_name(submission):
    student = submission.get('student')
    if not student:
        return ''
    return f"{student.get('first_name', '')} {student.get('last_name', '')}".strip()


def _is_graded(submission):
    return submission.get('score') is not None


def _write_csv(headers, rows):
    """Header row unquoted, data rows fully quoted."""
    output = io.StringIO()
    csv.writer(output, lineterminator='\n').writerow(headers)
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for row in rows:
        writer.writerow(row)
    return output.getvalue()


def sort_submissions(submissions, sort_by='date', search=''):
    """
    Filter by student name and sort for the submission history view.

    sort_by: "date" (newest first), "score" (highest first) or "student" (A-Z).
    """
    search = (search or '').lower()
    filtered = [s for s in submissions if search in student_display_name(s).lower()]

    if sort_by == 'score':
        return sorted(filtered, key=lambda s: s.get('score') or 0, reverse=True)
    if sort_by == 'student':
        return sorted(filtered, key=lambda s: student_display_name(s).lower())
    return sorted(filtered, key=lambda s: s.get('created_at') or '', reverse=True)


def submissions_csv(submissions, total_points=None):
    """Graded submissions of one assignment as CSV."""
    total_points = total_points or DEFAULT_TOTAL_POINTS
    rows = []
    for sub in submissions:
        if not _is_graded(sub):
            continue
        score = sub.get('score') or 0
        percentage = round(score / total_points * 100)
        rows.append([
            student_display_name(sub) or 'Unknown Student',
            score,
            f"{percentage}%",
            sub.get('feedback') or '',
            sub.get('submitted_at') or '',
            sub.get('graded_at') or '',
        ])
    return _write_csv(SUBMISSION_HEADERS, rows)


def grading_results_csv(results):
    """Completed bulk-grading results as CSV."""
    rows = []
    for item in results:
        if item.get('status') != 'completed':
            continue
        grading = item.get('grading') or {}
        rows.append([
            item.get('studentName', ''),
            grading.get('score', ''),
            f"{grading.get('percentage', '')}%",
            grading.get('letterGrade', ''),
            grading.get('feedback', ''),
        ])
    return _write_csv(GRADING_RESULT_HEADERS, rows)


def user_data_export(profile, assignments, submissions, students, now=None):
    """Everything a teacher owns, for the settings-page download."""
    now = now or datetime.now(timezone.utc)
    return {
        "profile": profile,
        "assignments": assignments or [],
        "submissions": submissions or [],
        "students": students or [],
        "exported_at": now.isoformat(),
    }


def export_filename(now=None):
    now = now or datetime.now(timezone.utc)
    return f"gradeai-data-export-{now.strftime('%Y-%m-%d')}.json"
