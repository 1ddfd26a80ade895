from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from .core.config import Settings, settings as default_settings
from .core.database import create_database
from .core.error_handlers import register_exception_handlers
from .core.logging import setup_logging

# Import all routers
from .routers import health, teachers, students, lessons, occurrences, agenda, payments, reports

logger = logging.getLogger(__name__)

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        logger.info("Starting music school API")

        database = create_database(settings.database_url, echo=settings.sql_echo)
        await database.connect()
        if settings.auto_create_tables:
            await database.create_all()
            logger.info("Database tables ensured")
        app.state.database = database

        yield

        logger.info("Shutting down music school API")
        await database.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Music School Admin API",
        description="Teachers, students, recurring lessons, occurrences and tuition payments",
        version=settings.app_version,
        lifespan=lifespan
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    register_exception_handlers(app)

    # Include all routers
    app.include_router(health.router)
    app.include_router(teachers.router)
    app.include_router(students.router)
    app.include_router(lessons.router)
    app.include_router(occurrences.router)
    app.include_router(agenda.router)
    app.include_router(payments.router)
    app.include_router(reports.router)

    @app.get("/")
    async def root():
        return {
            "message": "Music School Admin API",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health"
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("music_school.main:app", host="0.0.0.0", port=8000, reload=True)
