from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
import asyncio

from core.config import settings
from core.logging_config import setup_logging

# Feature routes
from features.tides.routes.tide_routes import router as tide_router
from features.locations.routes.location_routes import router as location_router

# Services and clients
from features.locations.services.key_value_store import FileKeyValueStore
from features.locations.services.preference_store import LocationPreferenceStore
from features.locations.services.geocoding_client import GeocodingClient
from features.tides.services.tide_client import WorldTidesClient
from features.tides.services.tide_session import TideSessionController

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        logger.info("🚀 Starting Tide Times API...")

        store = LocationPreferenceStore(FileKeyValueStore(settings.preferences_dir))
        store.load()

        tide_session = TideSessionController(
            client=WorldTidesClient(),
            store=store
        )
        app.state.preference_store = store
        app.state.tide_session = tide_session
        app.state.geocoding_client = GeocodingClient()

        # Restore the last location in the background so startup is not
        # held up by the tide request
        app.state.restore_task = asyncio.create_task(tide_session.load_saved_location())

        logger.info("✨ API startup complete - ready to serve requests")
        yield

    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")
        raise
    finally:
        logger.info("🔄 Shutting down API...")
        if hasattr(app.state, "restore_task"):
            app.state.restore_task.cancel()
            try:
                await app.state.restore_task
            except asyncio.CancelledError:
                pass

        if hasattr(app.state, "tide_session"):
            await app.state.tide_session.close()
        if hasattr(app.state, "geocoding_client"):
            await app.state.geocoding_client.close()

        logger.info("👋 API shutdown complete")

app = FastAPI(
    title="Tide Times API",
    description="Search for a coastal location and get its tides for the next 24 hours",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tide_router)
app.include_router(location_router)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "time": datetime.now().isoformat()
    }

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        workers=1
    )
