import itertools
import json
from datetime import datetime, timedelta, timezone

import pytest
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from mentalcare import create_app
from mentalcare.llm import LanguageModel


# ---------- in-memory Firestore ----------

class FakeSnapshot:
    def __init__(self, ref, data):
        self.reference = ref
        self.id = ref.id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, db, collection, doc_id):
        self.db = db
        self.collection = collection
        self.id = doc_id

    def get(self):
        if self.db.fail_reads:
            raise google_exceptions.ServiceUnavailable("firestore unavailable")
        return FakeSnapshot(self, self.db.data[self.collection].get(self.id))

    def set(self, record, merge=False):
        if self.db.fail_writes:
            raise google_exceptions.ServiceUnavailable("firestore unavailable")
        record = self.db.resolve(record)
        docs = self.db.data[self.collection]
        if merge and self.id in docs:
            docs[self.id] = {**docs[self.id], **record}
        else:
            docs[self.id] = record


class FakeQuery:
    def __init__(self, db, collection, filters=(), order=None):
        self.db = db
        self.collection = collection
        self.filters = list(filters)
        self.order = order

    def where(self, *args, filter=None):
        if filter is not None:
            clause = (filter.field_path, filter.op_string, filter.value)
        else:
            clause = tuple(args)
        return FakeQuery(self.db, self.collection, self.filters + [clause], self.order)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self.db, self.collection, self.filters, (field, direction))

    def stream(self):
        if self.db.fail_reads:
            raise google_exceptions.ServiceUnavailable("firestore unavailable")
        docs = self.db.data[self.collection]
        rows = []
        for doc_id, data in docs.items():
            if all(op == "==" and data.get(field) == value for field, op, value in self.filters):
                rows.append((doc_id, data))
        if self.order:
            field, direction = self.order
            rows.sort(key=lambda row: row[1][field], reverse=direction == "DESCENDING")
        return iter(FakeSnapshot(FakeDocRef(self.db, self.collection, doc_id), data) for doc_id, data in rows)


class FakeCollection(FakeQuery):
    def add(self, record):
        if self.db.fail_writes:
            raise google_exceptions.ServiceUnavailable("firestore unavailable")
        doc_id = f"doc{next(self.db.ids)}"
        self.db.data[self.collection][doc_id] = self.db.resolve(record)
        return self.db.now(), FakeDocRef(self.db, self.collection, doc_id)

    def document(self, doc_id):
        return FakeDocRef(self.db, self.collection, doc_id)


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.deletes = []

    def delete(self, ref):
        self.deletes.append(ref)

    def commit(self):
        self.db.commits += 1
        if self.db.fail_commit:
            raise google_exceptions.Aborted("batch aborted")
        for ref in self.deletes:
            self.db.data[ref.collection].pop(ref.id, None)


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.ids = itertools.count(1)
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.fail_writes = False
        self.fail_reads = False
        self.fail_commit = False
        self.commits = 0

    def now(self):
        self.clock += timedelta(seconds=1)
        return self.clock

    def resolve(self, record):
        return {k: (self.now() if v is firestore.SERVER_TIMESTAMP else v) for k, v in record.items()}

    def collection(self, name):
        self.data.setdefault(name, {})
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)


# ---------- scripted language model ----------

class ScriptedModel(LanguageModel):
    """Goes through the real parsing path; answers come from ``responses``.

    ``responses`` maps a schema name to a raw string or to a callable taking
    the rendered prompt and returning the raw string.
    """

    name = "scripted"

    def __init__(self, responses=None):
        super().__init__("scripted-model")
        self.responses = dict(responses or {})
        self.calls = []

    def _complete(self, prompt, schema, temperature):
        self.calls.append((schema.__name__, prompt))
        answer = self.responses[schema.__name__]
        if callable(answer):
            answer = answer(prompt)
        if isinstance(answer, Exception):
            raise answer
        return answer


def keyword_sentiment(prompt):
    text = prompt.rsplit("Message:", 1)[-1].lower()
    if "can't go on" in text or "end it" in text:
        return json.dumps({"sentiment": "severe_distress", "isDistress": True})
    for label in ("anxious", "stressed", "sad", "happy"):
        if label in text:
            return json.dumps({"sentiment": label, "isDistress": False})
    return json.dumps({"sentiment": "neutral", "isDistress": False})


SUPPORTIVE = "That sounds really hard, and it makes sense to feel this way. Take it one small step at a time."


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def model():
    return ScriptedModel({
        "SentimentClassification": keyword_sentiment,
        "SupportiveReply": json.dumps({"reply": SUPPORTIVE}),
    })


@pytest.fixture
def app(db, model):
    app = create_app(
        overrides={"TESTING": True, "SECRET_KEY": "test", "SESSION_COOKIE_SECURE": False},
        db=db,
        model=model,
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(monkeypatch):
    """Accept the session cookie ``good-cookie`` as user ``user-1``."""
    from firebase_admin import auth as firebase_auth

    def verify_session_cookie(cookie, check_revoked=False):
        if cookie == "good-cookie":
            return {"uid": "user-1"}
        raise firebase_auth.InvalidSessionCookieError("bad cookie")

    monkeypatch.setattr(firebase_auth, "verify_session_cookie", verify_session_cookie)
    return "user-1"
