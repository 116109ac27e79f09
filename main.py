from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from leadwatch.api.health import router as health_router
from leadwatch.api.v1 import cron, dashboard, follow_ups, notifications, tasks
from leadwatch.core.config import settings
from leadwatch.core.database import engine, init_db
from leadwatch.core.logging import get_logger, setup_logging
from leadwatch.core.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Alembic owns the schema in production; create_all only fills gaps
    try:
        await init_db()
    except Exception as e:
        logger.warning("create_tables_failed", error=str(e))

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Lead inactivity detection and escalation",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)
app.state.debug = settings.DEBUG

Instrumentator().instrument(app).expose(app)

# Add middleware (order matters - last added = first executed)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(cron.router, prefix="/api/v1")
app.include_router(follow_ups.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")
app.include_router(tasks.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
