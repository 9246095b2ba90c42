import logging

from fastapi import FastAPI
from redis import RedisError

from .config import settings
from .redis_client import redis_client
from .routers import blocked_times, business_hours, calendar, slots

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="BarberHub Scheduling API")

app.include_router(slots.router)
app.include_router(calendar.router)
app.include_router(business_hours.router)
app.include_router(blocked_times.router)


@app.get("/health")
def health():
    if redis_client is None:
        return {"redis": None}
    try:
        return {"redis": redis_client.ping()}
    except RedisError:
        logger.warning("Redis ping failed", exc_info=True)
        return {"redis": False}
