"""Shared fixtures: an in-memory Airtable base served through httpx.MockTransport."""

from __future__ import annotations

import itertools
import json
import re
from typing import Any

import httpx
import pytest

from datagate.airtable import AirtableDataSource, build_schema
from datagate.config import DataSourceConfig
from datagate.schema import DataSourceSchema

pytest_plugins = ["pytest_asyncio"]

BASE_ID = "appTestBase"
HOST = f"airtable://keyTest@{BASE_ID}"

_EQUALS = re.compile(r'^\{(?P<field>[^}]+)\}="(?P<value>(?:[^"\\]|\\.)*)"$')


def _catalog() -> list[dict[str, Any]]:
    return [
        {
            "id": "tblCustomers",
            "name": "Customers",
            "primaryFieldId": "fldName",
            "fields": [
                {"id": "fldName", "name": "Name", "type": "singleLineText"},
                {"id": "fldEmail", "name": "Email", "type": "email"},
                {
                    "id": "fldOrders",
                    "name": "Orders",
                    "type": "multipleRecordLinks",
                    "options": {"linkedTableId": "tblOrders"},
                },
            ],
        },
        {
            "id": "tblOrders",
            "name": "Orders",
            "primaryFieldId": "fldRef",
            "fields": [
                {"id": "fldRef", "name": "Ref", "type": "singleLineText"},
                {
                    "id": "fldCustomer",
                    "name": "CustomerId",
                    "type": "multipleRecordLinks",
                    "options": {"linkedTableId": "tblCustomers"},
                },
                {"id": "fldAmount", "name": "Amount", "type": "currency"},
                {"id": "fldPaid", "name": "Paid", "type": "checkbox"},
                {"id": "fldPlaced", "name": "PlacedAt", "type": "dateTime"},
                {
                    "id": "fldStatus",
                    "name": "Status",
                    "type": "singleSelect",
                    "options": {
                        "choices": [
                            {"id": "sel1", "name": "open"},
                            {"id": "sel2", "name": "closed"},
                        ]
                    },
                },
                {"id": "fldDeleted", "name": "deletedAt", "type": "singleLineText"},
                {"id": "fldVote", "name": "Vote", "type": "someFutureType"},
            ],
        },
    ]


class FakeAirtable:
    """
    Minimal stateful Airtable base.

    Supports the metadata endpoints, listRecords with cursors, pageSize,
    fields and a ``{Field}="value"`` formula, and record CRUD. Every
    request is appended to ``requests`` as ``(method, path, json_body)``.
    """

    def __init__(self) -> None:
        self.tables: list[dict[str, Any]] = _catalog()
        self.records: dict[str, list[dict[str, Any]]] = {
            t["name"]: [] for t in self.tables
        }
        self.requests: list[tuple[str, str, Any]] = []
        self.reject_table_create = False
        self.fail_paths: set[str] = set()
        self._ids = itertools.count(1)

    # ── seeding ──────────────────────────────────────────────────────

    def add(self, table: str, fields: dict[str, Any], record_id: str | None = None) -> str:
        record_id = record_id or f"rec{next(self._ids):05d}"
        self.records[table].append({"id": record_id, "fields": dict(fields)})
        return record_id

    def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        return next((r for r in self.records[table] if r["id"] == record_id), None)

    def calls(self, method: str, suffix: str = "") -> list[tuple[str, str, Any]]:
        return [r for r in self.requests if r[0] == method and r[1].endswith(suffix)]

    # ── transport ────────────────────────────────────────────────────

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))

        if path in self.fail_paths:
            return _error(500, "SERVER_ERROR", "Boom")

        parts = path.split("/")[2:]  # drop "" and "v0"
        if parts[0] == "meta":
            return self._meta(request.method, parts[1:], body)
        if parts[0] != BASE_ID:
            return _error(404, "NOT_FOUND")
        table = parts[1]
        if table not in self.records:
            return _error(404, "TABLE_NOT_FOUND", f"Could not find table {table}")

        if len(parts) == 3 and parts[2] == "listRecords":
            return self._list(table, body or {})
        if len(parts) == 2 and request.method == "POST":
            created = [self.get(table, self.add(table, r["fields"])) for r in body["records"]]
            return httpx.Response(200, json={"records": created})
        if len(parts) == 3:
            return self._record(request.method, table, parts[2], body)
        return _error(404, "NOT_FOUND")

    def _meta(self, method: str, parts: list[str], body: Any) -> httpx.Response:
        if parts == ["bases"]:
            return httpx.Response(200, json={"bases": [{"id": BASE_ID, "name": "Test"}]})
        if parts == ["bases", BASE_ID, "tables"]:
            if method == "GET":
                return httpx.Response(200, json={"tables": self.tables})
            if self.reject_table_create:
                return _error(422, "INVALID_REQUEST_UNKNOWN", "Invalid table definition")
            table = {
                "id": f"tbl{body['name']}",
                "name": body["name"],
                "fields": [
                    {"id": f"fld{i}", **f} for i, f in enumerate(body["fields"])
                ],
            }
            self.tables.append(table)
            self.records[body["name"]] = []
            return httpx.Response(200, json=table)
        return _error(404, "NOT_FOUND")

    def _list(self, table: str, body: dict[str, Any]) -> httpx.Response:
        rows = list(self.records[table])

        formula = body.get("filterByFormula")
        if formula:
            match = _EQUALS.match(formula)
            if match is None:
                return _error(422, "INVALID_FILTER_BY_FORMULA", formula)
            field, value = match["field"], match["value"]
            rows = [r for r in rows if str(r["fields"].get(field, "")) == value]

        for spec in reversed(body.get("sort") or []):
            rows.sort(
                key=lambda r, f=spec["field"]: str(r["fields"].get(f, "")),
                reverse=spec.get("direction") == "desc",
            )

        start = int(body.get("offset") or 0)
        size = int(body.get("pageSize") or 100)
        page = rows[start : start + size]

        if "fields" in body:
            wanted = set(body["fields"])
            page = [
                {"id": r["id"], "fields": {k: v for k, v in r["fields"].items() if k in wanted}}
                for r in page
            ]

        payload: dict[str, Any] = {"records": page}
        if start + size < len(rows):
            payload["offset"] = str(start + size)
        return httpx.Response(200, json=payload)

    def _record(
        self, method: str, table: str, record_id: str, body: Any
    ) -> httpx.Response:
        record = self.get(table, record_id)
        if record is None:
            return _error(404, "NOT_FOUND")
        if method == "GET":
            return httpx.Response(200, json=record)
        if method == "PATCH":
            record["fields"].update(body["fields"])
            return httpx.Response(200, json=record)
        if method == "DELETE":
            self.records[table].remove(record)
            return httpx.Response(200, json={"id": record_id, "deleted": True})
        return _error(405, "METHOD_NOT_ALLOWED")


def _error(status: int, error_type: str, message: str | None = None) -> httpx.Response:
    if message is None:
        return httpx.Response(status, json={"error": error_type})
    return httpx.Response(status, json={"error": {"type": error_type, "message": message}})


@pytest.fixture
def fake_airtable() -> FakeAirtable:
    return FakeAirtable()


@pytest.fixture
def config() -> DataSourceConfig:
    return DataSourceConfig(host=HOST)


@pytest.fixture
async def datasource(config, fake_airtable):
    source = AirtableDataSource(config, transport=httpx.MockTransport(fake_airtable))
    yield source
    await source.close()


@pytest.fixture
async def orders_schema(datasource):
    return await datasource.get_schema("Orders")


@pytest.fixture
def catalog() -> list[dict[str, Any]]:
    return _catalog()


@pytest.fixture
def orders(catalog) -> DataSourceSchema:
    """Orders schema derived offline from the catalog."""
    return build_schema("Orders", catalog)
