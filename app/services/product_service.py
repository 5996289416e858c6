import logging
import math
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from app.models import ProductCreate, ProductUpdate
from app.services.errors import (
    AuthorizationRequiredError,
    ForbiddenError,
    ProductNotFoundError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "medium"

# Errors raised by the driver (or by ObjectId for a malformed id) are reported
# to the caller with a generic message only.
STORE_ERRORS = (PyMongoError, InvalidId)


# ----------------------------
# Helpers
# ----------------------------

def _now() -> datetime:
    # BSON dates hold milliseconds; trim so the stored value matches the one returned
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def parse_price(value) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if not math.isfinite(price):
        raise ValidationError("Price must be a number")
    return price


def serialize_product(doc: dict) -> dict:
    """
    Return a JSON-friendly copy of a stored product. The ObjectId becomes its
    hex string and naive datetimes (as the driver returns them) are marked UTC.
    """
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    for key, value in out.items():
        if isinstance(value, datetime) and value.tzinfo is None:
            out[key] = value.replace(tzinfo=timezone.utc)
    return out


async def _find_owned_product(collection, product_id: str, user_email, action: str) -> dict:
    """
    Authorization gate shared by update and delete: email present, product
    exists, email matches the stored owner. Checked in that order.
    """
    if not user_email:
        raise AuthorizationRequiredError("User email is required for authorization")

    existing = await collection.find_one({"_id": ObjectId(product_id)})
    if not existing:
        raise ProductNotFoundError()

    if existing.get("userEmail") != user_email:
        raise ForbiddenError(f"Unauthorized: You can only {action} your own products")

    return existing


# ----------------------------
# Handlers
# ----------------------------

async def list_products(collection) -> list[dict]:
    try:
        docs = await collection.find({}).to_list(None)
    except STORE_ERRORS as e:
        logger.exception("Error fetching products: %s", e)
        raise StoreError("Failed to fetch products")
    return [serialize_product(d) for d in docs]


async def get_product(collection, product_id: str) -> dict:
    try:
        doc = await collection.find_one({"_id": ObjectId(product_id)})
    except STORE_ERRORS as e:
        logger.exception("Error fetching product %s: %s", product_id, e)
        raise StoreError("Failed to fetch product")

    if not doc:
        raise ProductNotFoundError()
    return serialize_product(doc)


async def create_product(collection, payload: ProductCreate) -> dict:
    if not (payload.title and payload.image and payload.description and payload.price):
        raise ValidationError("Missing required fields: title, image, description, price")

    if not payload.userEmail:
        raise ValidationError("User email is required")

    meta = payload.meta
    new_product = {
        "title": payload.title,
        "image": payload.image,
        "description": payload.description,
        "price": parse_price(payload.price),
        "userEmail": payload.userEmail,
        "meta": {
            "date": (meta and meta.date) or _now().date().isoformat(),
            "priority": (meta and meta.priority) or DEFAULT_PRIORITY,
        },
        "createdAt": _now(),
    }

    try:
        result = await collection.insert_one(new_product)
    except STORE_ERRORS as e:
        logger.exception("Error adding product: %s", e)
        raise StoreError("Failed to add product")

    created = {"_id": result.inserted_id, **new_product}
    logger.info("Product %s added by %s", result.inserted_id, payload.userEmail)
    return serialize_product(created)


async def update_product(collection, product_id: str, payload: ProductUpdate) -> int:
    """
    Merge the supplied fields into the product and return the modified count.

    Falsy fields are left out of the update rather than cleared. `meta`, when
    given, replaces the stored record as a whole.
    """
    try:
        await _find_owned_product(collection, product_id, payload.userEmail, "update")

        update_data = {}
        for field in ("title", "image", "description"):
            value = getattr(payload, field)
            if value:
                update_data[field] = value
        if payload.price:
            update_data["price"] = parse_price(payload.price)
        if payload.meta is not None:
            update_data["meta"] = payload.meta
        update_data["updatedAt"] = _now()

        # owner is part of the filter so a record that changed hands or vanished
        # since the check above is left alone
        result = await collection.update_one(
            {"_id": ObjectId(product_id), "userEmail": payload.userEmail},
            {"$set": update_data},
        )
    except STORE_ERRORS as e:
        logger.exception("Error updating product %s: %s", product_id, e)
        raise StoreError("Failed to update product")

    logger.info("Product %s updated (modified: %s)", product_id, result.modified_count)
    return result.modified_count


async def delete_product(collection, product_id: str, user_email) -> int:
    try:
        await _find_owned_product(collection, product_id, user_email, "delete")

        result = await collection.delete_one(
            {"_id": ObjectId(product_id), "userEmail": user_email}
        )
    except STORE_ERRORS as e:
        logger.exception("Error deleting product %s: %s", product_id, e)
        raise StoreError("Failed to delete product")

    logger.info("Product %s deleted (deleted: %s)", product_id, result.deleted_count)
    return result.deleted_count
