import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from app.api.error_handlers import register_error_handlers
from app.api.router import api_router
from app.config import settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Product Handle API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(api_router)

@app.get("/", response_class=PlainTextResponse)
def root():
    return "Hello World!"


def run():
    """Serve the app locally; in production the platform serves app.main:app."""
    if settings.ENVIRONMENT == "production":
        logger.info("ENVIRONMENT is production, not starting the local server")
        return

    logger.info(f"Server listening on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
