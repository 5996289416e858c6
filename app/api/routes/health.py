from fastapi import APIRouter
from app.database.mongo import connector

router = APIRouter()

@router.get("")
async def health_check():
    # reports the connector state without forcing a connection
    return {
        "status": "healthy",
        "database": "connected" if connector.is_connected else "disconnected",
    }
