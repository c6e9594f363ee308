"""In-memory stand-ins for the Supabase query builder and the Stripe client."""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from vigil.billing.external.interfaces import PaymentProviderInterface
from vigil.billing.shared.models import PortalSession


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]
    count: Optional[int] = None


class FakeQuery:
    def __init__(self, db: 'FakeSupabase', table: str):
        self._db = db
        self._table = table
        self._op = 'select'
        self._payload = None
        self._filters = []
        self._limit = None
        self._count = None
        self._head = False
        self._on_conflict = None
        self._columns = None

    def select(self, *columns, count=None, head=None):
        self._op = 'select'
        self._columns = [c.strip() for c in ','.join(columns).split(',')]
        self._count = count
        self._head = bool(head)
        return self

    def insert(self, row):
        self._op, self._payload = 'insert', dict(row)
        return self

    def upsert(self, row, on_conflict=None):
        self._op, self._payload, self._on_conflict = 'upsert', dict(row), on_conflict
        return self

    def update(self, changes):
        self._op, self._payload = 'update', dict(changes)
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _project(self, row):
        if not self._columns or '*' in self._columns:
            return dict(row)
        return {c: row[c] for c in self._columns if c in row}

    async def execute(self) -> FakeResponse:
        self._db.calls.append((self._table, self._op, list(self._filters), self._payload))
        if self._table in self._db.errors:
            raise self._db.errors[self._table]

        rows = self._db.tables.setdefault(self._table, [])
        matched = [r for r in rows if all(r.get(c) == v for c, v in self._filters)]

        if self._op == 'select':
            count = self._db.counts.get(self._table, len(matched)) if self._count else None
            data = [] if self._head else matched[:self._limit] if self._limit else matched
            return FakeResponse(data=[self._project(r) for r in data], count=count)
        if self._op == 'insert':
            rows.append(self._payload)
            return FakeResponse(data=[self._payload])
        if self._op == 'upsert':
            key = self._on_conflict
            existing = next((r for r in rows if key and r.get(key) == self._payload.get(key)), None)
            if existing is not None:
                existing.update(self._payload)
            else:
                rows.append(self._payload)
            return FakeResponse(data=[self._payload])
        for row in matched:
            row.update(self._payload)
        return FakeResponse(data=[dict(r) for r in matched])


class FakeSupabase:
    def __init__(self, tables: Dict[str, List[Dict]] = None, counts: Dict[str, int] = None):
        self.tables = tables or {}
        self.counts = counts or {}
        self.errors: Dict[str, Exception] = {}
        self.calls = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


class FakeDB:
    def __init__(self, client: FakeSupabase):
        self._client = client

    @property
    async def client(self):
        return self._client

    async def disconnect(self):
        pass


class FakePaymentProvider(PaymentProviderInterface):
    def __init__(self, url: str = "https://billing.example/session/abc"):
        self.url = url
        self.error: Optional[Exception] = None
        self.subscriptions: Dict[str, Dict] = {}
        self.event: Optional[Dict] = None
        self.construct_error: Optional[Exception] = None
        self.portal_calls = []
        self.construct_calls = []

    async def create_portal_session(self, customer_id: str, return_url: str) -> PortalSession:
        self.portal_calls.append({'customer_id': customer_id, 'return_url': return_url})
        if self.error:
            raise self.error
        return PortalSession(url=self.url)

    async def retrieve_subscription(self, subscription_id: str) -> Dict:
        return self.subscriptions[subscription_id]

    def construct_event(self, payload: bytes, signature: str, secret: str) -> Dict:
        self.construct_calls.append((payload, signature, secret))
        if self.construct_error:
            raise self.construct_error
        return self.event


