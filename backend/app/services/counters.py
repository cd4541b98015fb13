# app/services/counters.py
import logging
from typing import Any, Dict

from google.cloud import firestore as gcf

logger = logging.getLogger("storefront.counters")

BRANDS = "brands"
CATS = "cats"


def _ref_id(value):
    """`brandA` or a reference path `.../documents/brands/brandA` -> `brandA`."""
    if isinstance(value, str) and "/" in value:
        return value.rstrip("/").rpartition("/")[2]
    return value


def _adjust_product_counters(db, product: Dict[str, Any], delta: int):
    """
    Ürünün markası ve kategorisindeki `amount` sayacını tek batch içinde değiştirir.
    Batch atomiktir; brand/cat dokümanlarından biri yoksa hiçbiri güncellenmez.
    """
    brand = _ref_id(product.get("brand"))
    category = _ref_id(product.get("category"))
    if not brand or not category:
        # document(None) would silently target an auto-generated id
        raise ValueError("MISSING_BRAND_OR_CATEGORY")
    batch = db.batch()
    batch.update(db.collection(BRANDS).document(brand), {"amount": gcf.Increment(delta)})
    batch.update(db.collection(CATS).document(category), {"amount": gcf.Increment(delta)})
    results = batch.commit()
    logger.info("Counters of brand %s / category %s adjusted by %+d", brand, category, delta)
    return results


def increment_product_counters(db, product: Dict[str, Any]):
    return _adjust_product_counters(db, product, 1)


def decrement_product_counters(db, product: Dict[str, Any]):
    return _adjust_product_counters(db, product, -1)
