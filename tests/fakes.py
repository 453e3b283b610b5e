"""
In-memory stand-in for the parts of the async Supabase client the app uses:
the PostgREST query builder, a storage bucket and ``auth.get_user``.
"""

import copy
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from postgrest.exceptions import APIError

VALID_TOKEN = "valid-token"

# child table -> (foreign key column, parent table); deletes cascade
FOREIGN_KEYS = {
    "projects": ("client_id", "clients"),
    "payments": ("project_id", "projects"),
    "project_updates": ("project_id", "projects"),
    "client_portals": ("project_id", "projects"),
}

UNIQUE_COLUMNS = {
    "client_portals": ("project_id", "access_token"),
}


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data
        self.count = len(data)


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.ordering: List[Tuple[str, bool]] = []
        self.max_rows: Optional[int] = None

    def select(self, *columns, count=None):
        self.operation = "select"
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def order(self, column, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, size):
        self.max_rows = size
        return self

    async def execute(self) -> FakeResponse:
        return self._db.run(self)


class FakeBucket:
    def __init__(self, storage: "FakeStorage", bucket: str):
        self._storage = storage
        self.bucket = bucket

    async def upload(self, path, file, file_options=None):
        if self._storage.fail_uploads:
            from storage3.utils import StorageException
            raise StorageException({"message": "Bucket not found", "statusCode": 404})
        self._storage.files[(self.bucket, path)] = (file, file_options or {})
        return SimpleNamespace(path=path, full_path=f"{self.bucket}/{path}")

    async def get_public_url(self, path, options=None):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.bucket}/{path}"


class FakeStorage:
    def __init__(self):
        self.files: Dict[Tuple[str, str], Any] = {}
        self.fail_uploads = False

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeAuth:
    async def get_user(self, jwt: str):
        if jwt != VALID_TOKEN:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(
            user=SimpleNamespace(id="8f4b2c7e-user", email="owner@example.com", role="authenticated")
        )


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "clients": [],
            "projects": [],
            "payments": [],
            "project_updates": [],
            "client_portals": [],
        }
        self._ids: Dict[str, int] = {name: 0 for name in self.tables}
        self._clock = datetime.now(timezone.utc)
        self._failures: Set[Tuple[str, str]] = set()
        self.executed: List[Tuple[str, str]] = []
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, operation: str) -> None:
        """Make every later ``operation`` on ``table`` fail like a PostgREST error."""
        self._failures.add((table, operation))

    def recover(self, table: str, operation: str) -> None:
        self._failures.discard((table, operation))

    def seed(self, table: str, **row) -> Dict[str, Any]:
        """Insert a row directly, bypassing failures; returns the stored row."""
        return self._insert(table, row)

    def _now(self) -> str:
        # Strictly increasing timestamps keep "newest first" orderings stable
        self._clock += timedelta(milliseconds=1)
        return self._clock.isoformat()

    def _insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(data)
        if table in FOREIGN_KEYS:
            column, parent = FOREIGN_KEYS[table]
            if not any(p["id"] == row.get(column) for p in self.tables[parent]):
                raise APIError({
                    "message": f'insert or update on table "{table}" violates foreign key constraint',
                    "code": "23503",
                })
        for column in UNIQUE_COLUMNS.get(table, ()):
            if any(r.get(column) == row.get(column) for r in self.tables[table]):
                raise APIError({
                    "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                    "code": "23505",
                })
        self._ids[table] += 1
        row.setdefault("id", self._ids[table])
        row.setdefault("created_at", self._now())
        self.tables[table].append(row)
        return copy.deepcopy(row)

    def _cascade(self, table: str, ids: List[int]) -> None:
        for child, (column, parent) in FOREIGN_KEYS.items():
            if parent != table:
                continue
            doomed = [r["id"] for r in self.tables[child] if r.get(column) in ids]
            self.tables[child] = [r for r in self.tables[child] if r.get(column) not in ids]
            if doomed:
                self._cascade(child, doomed)

    def run(self, query: FakeQuery) -> FakeResponse:
        self.executed.append((query.table, query.operation))
        if (query.table, query.operation) in self._failures:
            raise APIError({
                "message": f"simulated {query.operation} failure on {query.table}",
                "code": "XX000",
            })

        rows = self.tables[query.table]

        if query.operation == "insert":
            payload = query.payload if isinstance(query.payload, list) else [query.payload]
            return FakeResponse([self._insert(query.table, item) for item in payload])

        matched = [r for r in rows if all(f(r) for f in query.filters)]

        if query.operation == "update":
            for row in matched:
                row.update(copy.deepcopy(query.payload))
            return FakeResponse(copy.deepcopy(matched))

        if query.operation == "delete":
            ids = [r["id"] for r in matched]
            self.tables[query.table] = [r for r in rows if r["id"] not in ids]
            self._cascade(query.table, ids)
            return FakeResponse(copy.deepcopy(matched))

        for column, desc in reversed(query.ordering):
            matched = sorted(
                matched,
                key=lambda r: (r.get(column) is None, r.get(column)),
                reverse=desc,
            )
        if query.max_rows is not None:
            matched = matched[:query.max_rows]
        return FakeResponse(copy.deepcopy(matched))
