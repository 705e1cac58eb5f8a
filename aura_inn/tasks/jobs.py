"""Celery tasks. Each task runs its async job to completion in a fresh event loop."""

import asyncio
import logging

from aura_inn.config import settings
from aura_inn.services.booking_repository import build_booking_store
from aura_inn.services.notifications import NotificationDispatcher
from aura_inn.services.reminders import send_pre_arrival_reminders as run_sweep
from aura_inn.tasks.celery_app import celery

logger = logging.getLogger(__name__)


async def _sweep() -> dict[str, int]:
    # Engine and store are built inside this loop; pooled connections cannot
    # cross event loops.
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

    engine = create_async_engine(settings.async_database_url, pool_pre_ping=True)
    try:
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        store = build_booking_store(settings.booking_store, settings.data_dir, session_factory)
        dispatcher = NotificationDispatcher.from_settings(settings)
        return await run_sweep(store, dispatcher)
    finally:
        await engine.dispose()


@celery.task(name="aura_inn.tasks.jobs.send_pre_arrival_reminders")
def send_pre_arrival_reminders() -> dict[str, int]:
    result = asyncio.run(_sweep())
    logger.info("Pre-arrival reminder sweep finished: %s", result)
    return result
