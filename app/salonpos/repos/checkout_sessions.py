from datetime import datetime

from sqlalchemy import delete, insert, select, update

from app.salonpos.db.models import CheckoutSessionRecord


class CheckoutSessionRepository:
    def __init__(self, db):
        self.db = db

    def get_live_payload(self, key: str, *, now: datetime) -> str | None:
        stmt = select(CheckoutSessionRecord.payload).where(
            CheckoutSessionRecord.key == key,
            CheckoutSessionRecord.expires_at > now,
        )
        return self.db.execute(stmt).scalars().first()

    def insert(self, *, key: str, payload: str, version: int, expires_at: datetime, now: datetime) -> None:
        self.db.execute(
            insert(CheckoutSessionRecord).values(
                key=key,
                payload=payload,
                version=version,
                expires_at=expires_at,
                created_at=now,
                updated_at=now,
            )
        )
        self.db.commit()

    def compare_and_set(
        self,
        key: str,
        *,
        payload: str,
        version: int,
        expected_version: int,
        expires_at: datetime,
        now: datetime,
    ) -> bool:
        stmt = (
            update(CheckoutSessionRecord)
            .where(
                CheckoutSessionRecord.key == key,
                CheckoutSessionRecord.version == expected_version,
                CheckoutSessionRecord.expires_at > now,
            )
            .values(payload=payload, version=version, expires_at=expires_at, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def delete(self, key: str, *, expected_version: int | None = None) -> bool:
        stmt = delete(CheckoutSessionRecord).where(CheckoutSessionRecord.key == key)
        if expected_version is not None:
            stmt = stmt.where(CheckoutSessionRecord.version == expected_version)
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount > 0

    def purge_expired(self, *, now: datetime) -> int:
        stmt = delete(CheckoutSessionRecord).where(CheckoutSessionRecord.expires_at <= now)
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount
