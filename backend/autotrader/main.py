import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from autotrader.config import settings
from autotrader.database import init_db
from autotrader.dependencies import bot_registry, gateway, news_refresh_service
from autotrader.exceptions import AppError
from autotrader.routers import accounts_router, bot_router, news_router, trades_router
from autotrader.services.event_bus import BotEvent, EventType, event_bus

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Forex Autotrader")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(accounts_router.router)
app.include_router(bot_router.router)
app.include_router(trades_router.router)
app.include_router(news_router.router)


def log_bot_event(event: BotEvent):
    """Surface lifecycle, news and error events in the server log"""
    if event.type == EventType.ERROR:
        logger.warning(f"[{event.account_id}] {event.data.get('error_type')}: {event.data.get('message')}")
    elif event.type == EventType.NEWS_PAUSE:
        logger.info(f"[{event.account_id}] Trading paused for {event.data.get('symbol')}: high-impact news")
    elif event.type == EventType.STATUS_CHANGED:
        logger.info(f"[{event.account_id}] Bot status: {event.data.get('status')}")


# Startup/Shutdown events
@app.on_event("startup")
async def startup_event():
    logger.info("Initializing database...")
    await init_db()

    event_bus.subscribe(log_bot_event)

    await news_refresh_service.start()

    logger.info(f"Startup complete (gateway={settings.gateway_type})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down - stopping trading bots...")
    await bot_registry.stop_all()
    await news_refresh_service.stop()
    await event_bus.drain()
    await gateway.close()
    logger.info("Shutdown complete")


@app.get("/")
async def root():
    return {"message": "Forex Autotrader API"}


@app.get("/api/status")
async def get_status():
    return {
        "gateway": settings.gateway_type,
        "gateway_connected": await gateway.is_connected(),
        "running_bots": bot_registry.running_accounts(),
        "news_refresh": news_refresh_service.status,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
