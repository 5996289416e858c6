from app.config import settings
from app.database.mongo import connector


async def get_products_collection():
    """
    Readiness gate for every data route: connects on first use (or retries a
    failed attempt) and yields the products collection.
    """
    await connector.connect()
    return connector.collection(settings.MONGO_COLLECTION)
