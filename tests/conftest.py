"""
Shared test fixtures for GradeAI.
Replaces the Supabase client with an in-memory table store and the OpenAI
client with a canned responder. Zero network calls.
"""
import copy
import json
import time
from types import SimpleNamespace

import jwt
import pytest

from gradeai.config import config

JWT_SECRET = "test-jwt-secret"
TEACHER_ID = "teacher-1"
OTHER_TEACHER_ID = "teacher-2"


# ============ Fake Supabase ============

class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the PostgREST builder for the queries GradeAI issues."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = 'select'
        self.columns = '*'
        self.count_mode = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.descending = False
        self.limit_n = None
        self._negate = False

    # -- operations
    def select(self, columns='*', count=None):
        self.op = 'select'
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, payload):
        self.op = 'insert'
        self.payload = payload
        return self

    def update(self, payload):
        self.op = 'update'
        self.payload = payload
        return self

    def delete(self):
        self.op = 'delete'
        return self

    # -- filters
    def eq(self, column, value):
        self.filters.append(('eq', column, value, self._negate))
        self._negate = False
        return self

    @property
    def not_(self):
        self._negate = True
        return self

    def is_(self, column, value):
        self.filters.append(('is', column, value, self._negate))
        self._negate = False
        return self

    def order(self, column, desc=False):
        self.order_by = column
        self.descending = desc
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    # -- evaluation
    def _matches(self, row):
        for kind, column, value, negate in self.filters:
            if kind == 'eq':
                ok = row.get(column) == value
            else:
                ok = row.get(column) is None if value == 'null' else row.get(column) == value
            if negate:
                ok = not ok
            if not ok:
                return False
        return True

    def _shape(self, row):
        row = copy.deepcopy(row)
        if 'student:students' in self.columns:
            student = next(
                (s for s in self.db.tables.get('students', []) if s['id'] == row.get('student_id')),
                None,
            )
            row['student'] = copy.deepcopy(student)
            return row
        parts = [p.strip() for p in self.columns.split(',')]
        if '*' in parts:
            return row
        return {p: row.get(p) for p in parts}

    def execute(self):
        self.db.calls.append(self)
        if self.db.fail_with is not None:
            raise self.db.fail_with

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == 'insert':
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in payload:
                row = dict(item)
                row.setdefault('id', self.db.next_id(self.table))
                row.setdefault('created_at', self.db.next_timestamp())
                rows.append(row)
                created.append(copy.deepcopy(row))
            return FakeResult(created)

        matched = [r for r in rows if self._matches(r)]

        if self.op == 'update':
            for row in matched:
                row.update(self.payload)
            return FakeResult([copy.deepcopy(r) for r in matched])

        if self.op == 'delete':
            self.db.tables[self.table] = [r for r in rows if r not in matched]
            return FakeResult([copy.deepcopy(r) for r in matched])

        if self.order_by:
            matched = sorted(
                matched,
                key=lambda r: (r.get(self.order_by) is None, r.get(self.order_by) or ''),
                reverse=self.descending,
            )
        if self.limit_n is not None:
            matched = matched[:self.limit_n]
        count = len(matched) if self.count_mode == 'exact' else None
        return FakeResult([self._shape(r) for r in matched], count=count)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_with = None
        self._ids = 0
        self._clock = 0

    def table(self, name):
        return FakeQuery(self, name)

    def next_id(self, table):
        self._ids += 1
        return f"{table[:-1]}-{self._ids}"

    def next_timestamp(self):
        self._clock += 1
        return f"2025-01-01T00:00:{self._clock:02d}+00:00"

    def seed(self, table, *rows):
        stored = []
        for row in rows:
            row = dict(row)
            row.setdefault('id', self.next_id(table))
            row.setdefault('created_at', self.next_timestamp())
            self.tables.setdefault(table, []).append(row)
            stored.append(row)
        return stored


# ============ Fake AI clients ============

class FakeCompletions:
    def __init__(self):
        self.content = None
        self.error = None
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)

    def respond_with(self, payload):
        self.completions.content = payload if isinstance(payload, str) else json.dumps(payload)
        self.completions.error = None

    def fail_with(self, error):
        self.completions.error = error


GOOD_GRADING = {
    "score": 88,
    "percentage": 88,
    "letterGrade": "B",
    "feedback": "Clear thesis and good use of evidence.",
    "strengths": ["Thesis", "Evidence", "Structure"],
    "improvements": ["Conclusion", "Citations", "Transitions"],
    "rubricBreakdown": {"understanding": 23, "accuracy": 22, "completeness": 21, "effort": 22},
}


# ============ Fixtures ============

@pytest.fixture
def configured(monkeypatch):
    """Known credentials and model; auth enforced."""
    monkeypatch.setattr(config, "openai_api_key", "test-openai-key")
    monkeypatch.setattr(config, "anthropic_api_key", "")
    monkeypatch.setattr(config, "jwt_secret", JWT_SECRET)
    monkeypatch.setattr(config, "grading_model", "gpt-4.1-2025-04-14")
    monkeypatch.setattr(config, "max_tokens", 1500)
    monkeypatch.setattr(config, "local_dev", False)
    return config


@pytest.fixture
def fake_db(monkeypatch):
    """Install an empty in-memory Supabase as the shared client."""
    import gradeai.services.supabase_client as sc
    db = FakeSupabase()
    monkeypatch.setattr(sc, "_supabase", db)
    return db


@pytest.fixture
def fake_openai(monkeypatch, configured):
    """OpenAI client returning GOOD_GRADING unless told otherwise."""
    import gradeai.services.grading_service as gs
    client = FakeOpenAI()
    client.respond_with(GOOD_GRADING)
    monkeypatch.setattr(gs, "_openai_client", lambda: client)
    return client


@pytest.fixture
def assignment(fake_db):
    """One assignment owned by TEACHER_ID."""
    return fake_db.seed('assignments', {
        "user_id": TEACHER_ID,
        "title": "Causes of the American Revolution",
        "description": "Write a five-paragraph essay.",
        "total_points": 50,
        "due_date": None,
    })[0]


@pytest.fixture
def app(configured, fake_db):
    from gradeai.app import create_app
    flask_app = create_app()
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(user_id=TEACHER_ID, secret=JWT_SECRET, expires_in=3600, audience="authenticated"):
    now = int(time.time())
    return jwt.encode(
        {"sub": user_id, "email": f"{user_id}@school.test", "aud": audience,
         "iat": now, "exp": now + expires_in},
        secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_TEACHER_ID)}"}
