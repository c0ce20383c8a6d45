from __future__ import annotations

from typing import Any, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_json, to_json
from .repository import PolicyRepository


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict:
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        elif value is not None:
            merged[key] = value
    return merged


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, scope: str) -> Optional[Mapping[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT document FROM system_config WHERE scope=%s", (scope,))
            r = fetchone(cur)
            return from_json(r["document"]) if r else None

    def save(self, scope: str, document: Mapping[str, Any], *, updated_by: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT document FROM system_config WHERE scope=%s FOR UPDATE", (scope,))
            r = fetchone(cur)
            current = from_json(r["document"]) if r else {}
            self._write(cur, scope, deep_merge(current or {}, document), updated_by)

    def replace(self, scope: str, document: Mapping[str, Any], *, updated_by: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write(cur, scope, dict(document), updated_by)

    @staticmethod
    def _write(cur, scope: str, document: Mapping[str, Any], updated_by: str) -> None:
        cur.execute(
            """
            INSERT INTO system_config(scope, document, updated_by)
            VALUES(%s,%s,%s)
            ON DUPLICATE KEY UPDATE document=VALUES(document), updated_by=VALUES(updated_by)
            """,
            (scope, to_json(document), updated_by),
        )
