import asyncio
import logging
from fastapi import FastAPI
from event_signup.config import settings
from event_signup.routes import calendars, configuration, dialog, health, submissions
from event_signup.constants import APP_SETTINGS

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)

logger = logging.getLogger(__name__)


async def keep_trigger_alive(interval_seconds: float):
    """Re-check the submission watch until cancelled; watches lapse after seven days."""
    from event_signup.dependencies import get_configuration_manager
    while True:
        try:
            manager = await asyncio.to_thread(get_configuration_manager)
            action = await asyncio.to_thread(manager.ensure_trigger)
            logger.info(f"Trigger check: {action}")
        except Exception as e:
            logger.error(f"Trigger check failed: {e}")
        await asyncio.sleep(interval_seconds)


def create_app(validate_settings: bool = True) -> FastAPI:
    app = FastAPI(
        title=APP_SETTINGS.APP_NAME,
        version=APP_SETTINGS.VERSION,
        description=APP_SETTINGS.DESCRIPTION
    )
    background_tasks = []

    @app.on_event("startup")
    async def startup_event():
        """Validate configuration on startup, then start the trigger check"""
        if not validate_settings:
            return
        from event_signup.config import validate_required_keys
        try:
            validate_required_keys()
            logger.info("Configuration validation passed")
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        if settings.TRIGGER_CHECK_INTERVAL_HOURS > 0:
            interval = settings.TRIGGER_CHECK_INTERVAL_HOURS * 3600
            background_tasks.append(asyncio.create_task(keep_trigger_alive(interval)))

    @app.on_event("shutdown")
    async def shutdown_event():
        for task in background_tasks:
            task.cancel()
        background_tasks.clear()

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {APP_SETTINGS.APP_NAME}"}

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(dialog.router, prefix="/dialog", tags=["Dialog"])
    app.include_router(configuration.router, prefix="/configuration", tags=["Configuration"])
    app.include_router(calendars.router, prefix="/calendars", tags=["Calendars"])
    app.include_router(submissions.router, prefix="/submissions", tags=["Submissions"])

    return app


app = create_app()

def main():
    import uvicorn

    uvicorn.run(
        "event_signup.main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development"
    )

if __name__ == "__main__":
    main()
