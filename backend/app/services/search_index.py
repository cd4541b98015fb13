# app/services/search_index.py
"""
Keeps the Algolia `products` index in step with the `products` collection.

Records are always written whole: create and update both replace the record with the
current product data plus `objectID`. There is no diffing.
"""
import base64
import logging
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger("storefront.search")


def _search_value(value: Any) -> Any:
    """Flatten values Algolia cannot store as-is (timestamps, bytes)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, dict):
        return {k: _search_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_search_value(v) for v in value]
    return value


def product_record(product_id: str, product: Dict[str, Any]) -> Dict[str, Any]:
    record = _search_value(dict(product))
    record["objectID"] = product_id
    return record


def index_product(index, product_id: str, product: Dict[str, Any]):
    result = index.save_object(product_record(product_id, product))
    logger.info("Product %s indexed", product_id)
    return result


def reindex_product(index, product_id: str, product: Dict[str, Any]):
    result = index.save_object(product_record(product_id, product))
    logger.info("Product %s reindexed", product_id)
    return result


def unindex_product(index, product_id: str):
    result = index.delete_object(product_id)
    logger.info("Product %s removed from index", product_id)
    return result
