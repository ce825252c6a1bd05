"""Background job tasks"""

from datetime import datetime, timedelta
from uuid import UUID
import asyncio
import structlog

from ordercore.jobs.celery_app import celery_app

logger = structlog.get_logger()

MAX_ATTEMPTS = 5


_loop = None


def run_async(coro):
    """Helper to run async functions in sync context.

    One loop per worker process; pooled database connections are bound to it.
    """
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_loop)
    return _loop.run_until_complete(coro)


@celery_app.task(name="process_outbox_event")
def process_outbox_event(event_id: str):
    """Send the notification and audit entry for a committed order"""
    logger.info("Processing outbox event", event_id=event_id)

    async def _process():
        from ordercore.database import SessionLocal
        from ordercore.services.side_effects import process_outbox_event as process

        async with SessionLocal() as db:
            event = await process(db, UUID(event_id))
            if event is not None and event.last_error:
                logger.warning(
                    "Outbox event processed with errors",
                    event_id=event_id,
                    error=event.last_error,
                )

    run_async(_process())


@celery_app.task(name="requeue_pending_side_effects")
def requeue_pending_side_effects():
    """Re-dispatch events whose enqueue was lost"""
    logger.info("Re-queuing pending side effects")

    async def _requeue():
        from ordercore.database import SessionLocal
        from ordercore.models.outbox import OutboxEvent
        from sqlalchemy import select

        # Give the post-commit dispatch a head start
        cutoff = datetime.utcnow() - timedelta(minutes=2)

        async with SessionLocal() as db:
            result = await db.execute(
                select(OutboxEvent.id).where(
                    OutboxEvent.processed_at.is_(None),
                    OutboxEvent.attempts < MAX_ATTEMPTS,
                    OutboxEvent.created_at < cutoff,
                )
            )
            event_ids = result.scalars().all()

        for event_id in event_ids:
            process_outbox_event.delay(str(event_id))

        logger.info("Re-queued pending side effects", count=len(event_ids))

    run_async(_requeue())
