"""정기 작업 CLI — 토큰 정리, 오늘 발생하는 반복 규칙 처리.

Maintenance CLI — Jobs meant to be run from cron or a scheduler against
the configured storage backend.

Usage:
    python -m app.maintenance cleanup-tokens
    python -m app.maintenance process-recurring [--day 2024-03-15]
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import AsyncIterator

import typer

from app.config import Settings, get_settings
from app.database import create_engine, create_mongo_client, create_session_factory
from app.repositories.interfaces import Storage
from app.repositories.mongo import MongoStorageFactory
from app.repositories.storage import SqlStorageFactory
from app.services.auth_service import AuthService
from app.services.email_service import EmailService
from app.services.transaction_service import RecurringService

logger = logging.getLogger(__name__)

cli = typer.Typer(help="MyPila maintenance jobs")


@asynccontextmanager
async def open_storage(settings: Settings) -> AsyncIterator[Storage]:
    """설정된 백엔드의 작업 단위를 열고, 끝나면 연결을 닫습니다.

    Open one unit of work on the configured backend and release the
    underlying client or engine afterwards.
    """
    if settings.STORAGE_BACKEND == "mongo":
        client = create_mongo_client(settings)
        try:
            async with MongoStorageFactory(client, settings.MONGO_DATABASE)() as storage:
                yield storage
        finally:
            await client.close()
    else:
        engine = create_engine(settings)
        try:
            async with SqlStorageFactory(create_session_factory(engine))() as storage:
                yield storage
        finally:
            await engine.dispose()


async def run_cleanup_tokens(settings: Settings) -> tuple[int, int]:
    auth: AuthService = AuthService(settings, EmailService(settings))
    async with open_storage(settings) as storage:
        counts: tuple[int, int] = await auth.cleanup_tokens(storage)
        await storage.commit()
    return counts


async def run_process_recurring(settings: Settings, day: date | None = None) -> int:
    async with open_storage(settings) as storage:
        created: int = await RecurringService().process_due_today(storage, day)
        await storage.commit()
    return created


@cli.command("cleanup-tokens")
def cleanup_tokens() -> None:
    """만료/폐기된 토큰 삭제 — Delete expired and revoked tokens."""
    refresh_deleted, reset_deleted = asyncio.run(run_cleanup_tokens(get_settings()))
    typer.echo(f"Deleted tokens: refresh={refresh_deleted} reset={reset_deleted}")


@cli.command("process-recurring")
def process_recurring(
    day: datetime | None = typer.Option(None, formats=["%Y-%m-%d"], help="Run as if today were this date"),
) -> None:
    """오늘이 발생일인 반복 규칙 처리 — Materialise the rules due today."""
    created: int = asyncio.run(run_process_recurring(get_settings(), day.date() if day else None))
    typer.echo(f"Recurring transactions created: {created}")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )
    cli()
