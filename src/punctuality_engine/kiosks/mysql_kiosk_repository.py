from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Kiosk
from .repository import KioskRepository


class MySQLKioskRepository(KioskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, kiosk_id: str) -> Optional[Kiosk]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT kiosk_id, name, product_line, latitude, longitude, radius_override_meters, is_active
                FROM kiosks
                WHERE kiosk_id=%s
                """,
                (str(kiosk_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Kiosk(
                kiosk_id=r["kiosk_id"],
                name=r["name"],
                product_line=r["product_line"],
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                radius_override_meters=int(r["radius_override_meters"]) if r.get("radius_override_meters") else None,
                is_active=bool(r["is_active"]),
            )
