import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from app.core.config import settings
from app.core.cooldown_rate_limit import CooldownRateLimiter
from app.core.resume_store import SavedResumeStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    cooldown = CooldownRateLimiter(
        cooldown_s=settings.enhance_cooldown_s,
        entry_ttl_s=settings.cooldown_entry_ttl_s,
    )
    store = SavedResumeStore(settings.saved_resumes_db_path)
    app.state.cooldown_limiter = cooldown
    app.state.resume_store = store

    stop_event = asyncio.Event()

    async def periodic_sweep() -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=settings.cooldown_sweep_interval_s)
            except asyncio.TimeoutError:
                removed = cooldown.sweep()
                if removed:
                    logger.info("cooldown_sweep removed=%s remaining=%s", removed, len(cooldown))

    sweep_task = asyncio.create_task(periodic_sweep())
    yield
    stop_event.set()
    if not sweep_task.done():
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task
    store.close()
