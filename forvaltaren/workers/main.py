"""ARQ worker entrypoint."""

import asyncio

from arq import cron
from arq.connections import RedisSettings

from forvaltaren.core.config import get_settings
from forvaltaren.workers.overdue import sweep_overdue_invoices


def _redis_settings() -> RedisSettings:
    """Parse REDIS_URL into ARQ RedisSettings."""
    url = get_settings().redis_url
    # redis://host:port/db
    rest = url.split("://", 1)[1] if "://" in url else url
    host_port, _, db = rest.partition("/")
    host, _, port = host_port.partition(":")
    return RedisSettings(
        host=host or "localhost",
        port=int(port) if port else 6379,
        database=int(db) if db else 0,
    )


async def startup(ctx: dict) -> None:
    from forvaltaren.core.database import init_db
    await init_db()


class WorkerSettings:
    """ARQ worker configuration."""
    functions = [sweep_overdue_invoices]
    # Shortly after local midnight is when yesterday's due dates lapse.
    cron_jobs = [cron(sweep_overdue_invoices, hour={0}, minute={5}, run_at_startup=True)]
    on_startup = startup
    redis_settings = _redis_settings()
    max_jobs = 4
    job_timeout = 300


if __name__ == "__main__":
    from arq import run_worker
    asyncio.run(run_worker(WorkerSettings))  # type: ignore[arg-type]
