# app/services/images.py
"""
Stored image cleanup for deleted documents.

Both `products` and `cats` documents carry an `images` list of `{"name": ...}` entries
whose blobs live under `{collection}/{doc_id}/{name}` in the default bucket.
"""
import asyncio
import logging
from typing import Any, Iterable, List, Optional

logger = logging.getLogger("storefront.images")


def image_paths(collection: str, doc_id: str, images: Optional[Iterable[Any]]) -> List[str]:
    """Blob paths for every named image of a document; unnamed entries are skipped."""
    paths = []
    for image in images or []:
        name = image.get("name") if isinstance(image, dict) else None
        if not name:
            logger.warning("Skipping image without a name on %s/%s: %r", collection, doc_id, image)
            continue
        paths.append(f"{collection}/{doc_id}/{name}")
    return paths


async def delete_document_images(bucket, collection: str, doc_id: str, images) -> int:
    """
    Deletes all blobs of the document concurrently and waits for every one of them.
    Any failing delete fails the whole call; blobs already deleted are not tracked.
    Returns the number of blobs deleted.
    """
    paths = image_paths(collection, doc_id, images)
    loop = asyncio.get_running_loop()
    # google-cloud-storage is blocking: each delete runs on the default executor
    await asyncio.gather(*(
        loop.run_in_executor(None, bucket.blob(path).delete) for path in paths
    ))
    logger.info("Deleted %d image(s) of %s/%s", len(paths), collection, doc_id)
    return len(paths)
