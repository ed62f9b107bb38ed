"""
Shared fixtures: an in-memory stand-in for the Supabase query builder.

Only the calls data_integrator makes are supported:
schema().table().select()/insert()/update()/delete(), eq(), order(), execute().
"""
import itertools
from types import SimpleNamespace

import pytest

import data_integrator


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = None
        self.payload = None
        self.filters = []
        self.ordering = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op, self.payload, list(self.filters)))

        if (self.table, self.op) in self.db.fail_on:
            raise Exception(f"{self.table} {self.op} rejected")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "select":
            data = [dict(r) for r in rows if self._matches(r)]
            if self.ordering:
                column, desc = self.ordering
                data.sort(key=lambda r: r.get(column) or "", reverse=desc)
            return SimpleNamespace(data=data)

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for row in payload:
                stored = {"id": f"{self.table}-{next(self.db.ids)}", **row}
                rows.append(stored)
                inserted.append(dict(stored))
            return SimpleNamespace(data=inserted)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)

        raise AssertionError(f"unsupported op {self.op}")


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_on = set()
        self.ids = itertools.count(1)

    def schema(self, name):
        return self

    def table(self, name):
        return FakeQuery(self, name)

    def ops(self, table=None):
        """(table, op) pairs in call order, optionally for one table."""
        return [(t, op) for t, op, _, _ in self.calls if table is None or t == table]


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeSupabase()
    monkeypatch.setattr(data_integrator, "get_supabase_client", lambda: db)
    return db
