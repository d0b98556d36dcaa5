import itertools
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from ai_cofounder.dependencies import AppClients, Settings, get_chat_service, get_conversation_index

DEMO_TOKEN = "test-token"
DEMO_USER_ID = "11111111-1111-1111-1111-111111111111"


# --------------------------------------------------------------------------- #
# In-memory Supabase double (table query builder + auth)
# --------------------------------------------------------------------------- #

class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.mode = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, *_cols):
        self.mode = "select"
        return self

    def insert(self, row):
        self.mode, self.payload = "insert", row
        return self

    def update(self, values):
        self.mode, self.payload = "update", values
        return self

    def delete(self):
        self.mode = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(str(row.get(col)) == str(val) for col, val in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.mode))
        if self.table in self.db.fail_tables:
            raise RuntimeError(f"{self.table} is unavailable")
        rows = self.db.tables.setdefault(self.table, [])

        if self.mode == "insert":
            fail_when = self.db.fail_insert_when.get(self.table)
            if fail_when and fail_when(self.payload):
                raise RuntimeError(f"insert into {self.table} rejected")
            row = dict(self.payload)
            row.setdefault("id", next(self.db.ids))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        matched = [r for r in rows if self._matches(r)]
        if self.mode == "update":
            for r in matched:
                r.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched])
        if self.mode == "delete":
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[dict(r) for r in matched])

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: str(r.get(column)), reverse=desc)
        if self.limit_n is not None:
            matched = matched[: self.limit_n]
        return SimpleNamespace(data=[dict(r) for r in matched])


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.registered = set()

    def get_user(self, token):
        user = self.tokens.get(token)
        if user is None:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=user)

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.registered:
            err = RuntimeError("User already registered")
            err.message = "User already registered"
            raise err
        self.registered.add(email)
        return SimpleNamespace(user=SimpleNamespace(id=f"uid-{len(self.registered)}", email=email))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_tables = set()
        self.fail_insert_when = {}
        self.ids = itertools.count(1)
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)


# --------------------------------------------------------------------------- #
# LLM + vector index doubles
# --------------------------------------------------------------------------- #

class FakeChatService:
    def __init__(self, reply="Sounds good.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []
        self.embedded = []

    async def complete(self, message, history=()):
        self.calls.append((message, list(history)))
        if self.error:
            raise self.error
        return self.reply

    async def embed(self, text):
        self.embedded.append(text)
        return [0.1, 0.2, 0.3]

    async def ping(self):
        if self.error:
            raise self.error


class FakeIndex:
    def __init__(self, hits=None, error=None):
        self.hits = hits or []
        self.error = error
        self.indexed = []
        self.searches = []

    async def index_exchange(self, user_id, message, reply, vector, project_id=None):
        if self.error:
            raise self.error
        self.indexed.append({"user_id": user_id, "message": message, "reply": reply, "project_id": project_id})
        return f"pt-{len(self.indexed)}"

    async def search(self, vector, user_id, limit=5):
        self.searches.append((vector, user_id, limit))
        return self.hits[:limit]

    async def ping(self):
        if self.error:
            raise self.error


# --------------------------------------------------------------------------- #
# Fixtures
# --------------------------------------------------------------------------- #

@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def fake_chat():
    return FakeChatService()


@pytest.fixture
def fake_index():
    return FakeIndex()


@pytest.fixture
def demo_settings():
    return Settings(auth_strategy="demo", demo_auth_token=DEMO_TOKEN, demo_user_id=DEMO_USER_ID)


@pytest.fixture
def app(demo_settings, fake_supabase, fake_chat, fake_index):
    from ai_cofounder.api import create_app

    application = create_app(settings=demo_settings, clients=AppClients(supabase=fake_supabase))
    application.dependency_overrides[get_chat_service] = lambda: fake_chat
    application.dependency_overrides[get_conversation_index] = lambda: fake_index
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {DEMO_TOKEN}"}


@pytest.fixture
def user_id():
    return DEMO_USER_ID
