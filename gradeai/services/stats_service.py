"""
Dashboard statistics: counts, average score and recent-assignment status.
"""
from datetime import datetime, timezone

from . import records, supabase_client

MINUTES_SAVED_PER_SUBMISSION = 5


def _parse_date(value):
    """Parse an ISO date or timestamp from Supabase. Naive values are UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def assignment_status(total_submissions, graded_submissions, due_date, now=None):
    """
    draft / active / completed for an assignment card.

    With submissions: completed once every one is graded, else active.
    Without: active while the due date is still ahead, else draft.
    """
    if total_submissions > 0:
        return 'completed' if graded_submissions == total_submissions else 'active'

    due = _parse_date(due_date)
    now = now or datetime.now(timezone.utc)
    if due is not None and due > now:
        return 'active'
    return 'draft'


def dashboard_stats(user_id):
    graded = records.submissions.count(user_id, graded_only=True)

    scored = (
        supabase_client.get_supabase()
        .table('submissions')
        .select('score')
        .eq('user_id', user_id)
        .not_.is_('score', 'null')
        .execute()
    ).data or []
    scores = [row.get('score') or 0 for row in scored]
    average = sum(scores) / len(scores) if scores else 0

    return {
        "assignmentsTotal": records.assignments.count(user_id),
        "assignmentsGraded": graded,
        "totalStudents": records.students.count(user_id),
        "totalClasses": records.classes.count(user_id),
        "averageScore": round(average, 1),
        "hoursEstimated": round(graded * MINUTES_SAVED_PER_SUBMISSION / 60, 1),
    }


def recent_assignments(user_id, limit=5, now=None):
    """Most recent assignments with submission counts and status."""
    rows = (
        supabase_client.get_supabase()
        .table('assignments')
        .select('*')
        .eq('user_id', user_id)
        .order('created_at', desc=True)
        .limit(max(limit, 1))
        .execute()
    ).data or []

    recent = []
    for assignment in rows:
        total = records.submissions.count(user_id, assignment_id=assignment['id'])
        graded = records.submissions.count(user_id, graded_only=True, assignment_id=assignment['id'])
        recent.append({
            **assignment,
            "totalSubmissions": total,
            "gradedSubmissions": graded,
            "status": assignment_status(total, graded, assignment.get('due_date'), now=now),
        })
    return recent
