"""
VidHub Celery Worker Tasks

Periodic maintenance of the relation table:
- Purge relations whose target no longer exists
- Collapse duplicate relations imported from stores without the unique constraint
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from celery import Celery

from vidhub.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# ── Celery App ───────────────────────────────────────────────────────────

celery_app = Celery(
    "vidhub",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_soft_time_limit=600,
    task_time_limit=900,
    task_default_queue="default",
    task_routes={
        "vidhub.workers.tasks.sweep_relations_task": {"queue": "maintenance"},
    },
)

# ── Periodic Tasks ───────────────────────────────────────────────────────

celery_app.conf.beat_schedule = {
    "sweep-relations": {
        "task": "vidhub.workers.tasks.sweep_relations_task",
        "schedule": float(settings.relation_sweep_interval_seconds),
    },
    "health-check-every-minute": {
        "task": "vidhub.workers.tasks.health_check_task",
        "schedule": 60.0,
    },
}


# ── Helpers ──────────────────────────────────────────────────────────────

def run_async(coro):
    """Run an async coroutine from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def sweep_relations() -> dict:
    """One full sweep: orphan purge followed by duplicate collapse."""
    from vidhub.core.database import async_session_factory, engine
    from vidhub.services.relations.maintenance_service import relation_maintenance_service

    try:
        async with async_session_factory() as db:
            purged = await relation_maintenance_service.purge_orphans(db)
            collapsed = await relation_maintenance_service.collapse_duplicates(db)
    finally:
        # Pooled connections are bound to the loop that is about to close
        await engine.dispose()

    return {
        "purged": purged,
        "collapsed": collapsed,
    }


# ── Tasks ────────────────────────────────────────────────────────────────

@celery_app.task(
    name="vidhub.workers.tasks.sweep_relations_task",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def sweep_relations_task(self):
    try:
        logger.info("Starting relation sweep")
        stats = run_async(sweep_relations())
        logger.info(f"Relation sweep complete: {stats}")
        return stats
    except Exception as exc:
        logger.error(f"Relation sweep failed: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))


@celery_app.task(name="vidhub.workers.tasks.health_check_task")
def health_check_task():
    """Periodic health check — ensures workers are alive."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
