"""
Owner-scoped record access for GradeAI.

Every table row belongs to the teacher who created it (``user_id``). All
reads and writes in this module filter on that column, and inserts stamp it
from the authenticated user rather than from request data.

Tables:
- assignments, students, submissions, classes: ``OwnedTable`` keyed by ``id``
- profiles: one row per teacher, keyed by ``user_id``
"""
import logging
from datetime import datetime, timezone

from . import supabase_client
from ..config import DEFAULT_TOTAL_POINTS

logger = logging.getLogger(__name__)

ASSIGNMENT_FIELDS = ('title', 'description', 'due_date', 'class_id', 'total_points')
STUDENT_FIELDS = ('first_name', 'last_name', 'email', 'student_id')
SUBMISSION_FIELDS = ('assignment_id', 'student_id', 'score', 'feedback', 'submitted_at', 'graded_at')
CLASS_FIELDS = ('name',)
PROFILE_FIELDS = (
    'display_name', 'school_name', 'years_teaching', 'student_count',
    'preferred_grading_style', 'grade_levels', 'subjects',
)
PROFILE_INT_FIELDS = ('years_teaching', 'student_count')

SUBMISSION_SELECT = '*, student:students(*)'


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _to_int_or_none(value):
    """Coerce form input to int; blank or invalid input becomes None."""
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_list(value, field):
    """A single string becomes a one-item list; anything but a list is rejected."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(f"{field} must be a list")


class OwnedTable:
    """CRUD over one Supabase table, always filtered by owner."""

    def __init__(self, table, fields, order_by='created_at', descending=True, select='*'):
        self.table = table
        self.fields = fields
        self.order_by = order_by
        self.descending = descending
        self.select = select

    def _query(self):
        return supabase_client.get_supabase().table(self.table)

    def clean(self, data):
        """Keep only writable columns; user_id and id are never taken from input."""
        return {k: v for k, v in (data or {}).items() if k in self.fields}

    def list(self, user_id, **filters):
        query = self._query().select(self.select).eq('user_id', user_id)
        for column, value in filters.items():
            query = query.eq(column, value)
        if self.order_by:
            query = query.order(self.order_by, desc=self.descending)
        result = query.execute()
        return result.data or []

    def get(self, user_id, row_id):
        result = (
            self._query()
            .select(self.select)
            .eq('id', row_id)
            .eq('user_id', user_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def create(self, user_id, data):
        row = self.clean(data)
        row['user_id'] = user_id
        result = self._query().insert(row).execute()
        if not result.data:
            raise Exception(f"Failed to create {self.table} row")
        created = result.data[0]
        if self.select != '*':
            return self.get(user_id, created['id']) or created
        return created

    def create_many(self, user_id, rows):
        payload = []
        for data in rows:
            row = self.clean(data)
            row['user_id'] = user_id
            payload.append(row)
        if not payload:
            return []
        result = self._query().insert(payload).execute()
        created = result.data or []
        if self.select != '*' and created:
            ids = {r['id'] for r in created}
            return [r for r in self.list(user_id) if r['id'] in ids]
        return created

    def update(self, user_id, row_id, data):
        changes = self.clean(data)
        if not changes:
            raise ValueError("No valid fields to update")
        result = (
            self._query()
            .update(changes)
            .eq('id', row_id)
            .eq('user_id', user_id)
            .execute()
        )
        if not result.data:
            return None
        if self.select != '*':
            return self.get(user_id, row_id)
        return result.data[0]

    def delete(self, user_id, row_id):
        result = (
            self._query()
            .delete()
            .eq('id', row_id)
            .eq('user_id', user_id)
            .execute()
        )
        return bool(result.data)

    def count(self, user_id, graded_only=False, **filters):
        query = self._query().select('id', count='exact').eq('user_id', user_id)
        for column, value in filters.items():
            query = query.eq(column, value)
        if graded_only:
            query = query.not_.is_('score', 'null')
        result = query.execute()
        return result.count or 0


assignments = OwnedTable('assignments', ASSIGNMENT_FIELDS)
students = OwnedTable('students', STUDENT_FIELDS, order_by='last_name', descending=False)
submissions = OwnedTable('submissions', SUBMISSION_FIELDS, select=SUBMISSION_SELECT)
classes = OwnedTable('classes', CLASS_FIELDS, order_by='name', descending=False)


# ============ Assignments ============

def compose_description(description, subject='', grade_level='', instructions='',
                        learning_objectives=None, rubric=''):
    """Fold the optional create-form fields into the stored description."""
    parts = [description.strip()]

    meta = []
    if subject:
        meta.append(f"Subject: {subject}")
    if grade_level:
        meta.append(f"Grade Level: {grade_level}")
    if meta:
        parts.append('\n'.join(meta))

    if instructions:
        parts.append(f"Instructions:\n{instructions}")
    if learning_objectives:
        bullets = '\n'.join(f"• {obj}" for obj in learning_objectives)
        parts.append(f"Learning Objectives:\n{bullets}")
    if rubric:
        parts.append(f"Rubric:\n{rubric}")

    return '\n\n'.join(parts)


def create_assignment(user_id, data):
    """
    Create an assignment from the create-assignment form.

    Title and description are required. Points default to 100. Subject,
    grade level, instructions, learning objectives and rubric are appended
    to the description.
    """
    title = (data.get('title') or '').strip()
    description = (data.get('description') or '').strip()
    if not title or not description:
        raise ValueError("Please provide both a title and description for the assignment.")

    row = {
        'title': title,
        'description': compose_description(
            description,
            subject=data.get('subject', ''),
            grade_level=data.get('gradeLevel', ''),
            instructions=data.get('instructions', ''),
            learning_objectives=_as_list(data.get('learningObjectives'), 'learningObjectives'),
            rubric=data.get('rubric', ''),
        ),
        'total_points': _to_int_or_none(data.get('total_points')) or DEFAULT_TOTAL_POINTS,
        'due_date': data.get('due_date') or None,
    }
    if data.get('class_id'):
        row['class_id'] = data['class_id']

    created = assignments.create(user_id, row)
    logger.info("Assignment created: %s", created.get('id'))
    return created


# ============ Submissions ============

def create_submission(user_id, data):
    """Create one submission after checking the assignment and student are owned."""
    assignment_id = data.get('assignment_id')
    student_id = data.get('student_id')
    if not assignment_id or not student_id:
        raise ValueError("assignment_id and student_id are required")
    _check_owned(user_id, assignment_id=assignment_id, student_ids=[student_id])
    return submissions.create(user_id, data)


def _check_owned(user_id, assignment_id=None, student_ids=()):
    """Raise LookupError unless the assignment and every student belong to user_id."""
    if assignment_id is not None and assignments.get(user_id, assignment_id) is None:
        raise LookupError("Assignment not found")
    for student_id in student_ids:
        if students.get(user_id, student_id) is None:
            raise LookupError("Student not found")


def create_bulk_submissions(user_id, assignment_id, student_ids):
    """Create an empty submission for every student id on one assignment."""
    if not assignment_id:
        raise ValueError("assignmentId is required")
    if not student_ids:
        raise ValueError("No students selected")
    student_ids = _as_list(student_ids, 'studentIds')
    _check_owned(user_id, assignment_id=assignment_id, student_ids=student_ids)

    rows = [{'assignment_id': assignment_id, 'student_id': sid} for sid in student_ids]
    return submissions.create_many(user_id, rows)


def update_submission(user_id, submission_id, data):
    """
    Update a submission; a new score without graded_at stamps it now.

    Re-pointing the submission at another assignment or student requires
    the caller to own the new row.
    """
    changes = dict(data or {})
    _check_owned(
        user_id,
        assignment_id=changes.get('assignment_id'),
        student_ids=[changes['student_id']] if changes.get('student_id') is not None else [],
    )
    if changes.get('score') is not None and not changes.get('graded_at'):
        changes['graded_at'] = _now_iso()
    return submissions.update(user_id, submission_id, changes)


# ============ Profiles ============

def get_profile(user_id):
    db = supabase_client.get_supabase()
    result = db.table('profiles').select('*').eq('user_id', user_id).limit(1).execute()
    return result.data[0] if result.data else None


def _profile_changes(data):
    changes = {k: v for k, v in (data or {}).items() if k in PROFILE_FIELDS}
    for field in PROFILE_INT_FIELDS:
        if field in changes:
            changes[field] = _to_int_or_none(changes[field])
    for field in ('grade_levels', 'subjects'):
        if field in changes:
            # keep first occurrence order, drop blanks and repeats
            seen = []
            for item in _as_list(changes[field], field):
                if item and item not in seen:
                    seen.append(item)
            changes[field] = seen
    return changes


def update_profile(user_id, data):
    changes = _profile_changes(data)
    if not changes:
        raise ValueError("No valid fields to update")
    changes['updated_at'] = _now_iso()

    db = supabase_client.get_supabase()
    result = db.table('profiles').update(changes).eq('user_id', user_id).execute()
    return result.data[0] if result.data else None


def complete_onboarding(user_id, data):
    """Save the teacher questionnaire and mark onboarding complete."""
    changes = _profile_changes(data)
    changes['onboarding_completed'] = True
    changes['updated_at'] = _now_iso()

    db = supabase_client.get_supabase()
    result = db.table('profiles').update(changes).eq('user_id', user_id).execute()
    return result.data[0] if result.data else None
