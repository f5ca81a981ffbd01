import logging
import os

from fastapi import APIRouter, HTTPException
from starlette.responses import FileResponse

from app.services.storage import LocalBucket, StorageError
from app.utils import config

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{bucket}/{object_path:path}")
def read_object(bucket: str, object_path: str):
    """Serve an object from the local bucket; the root is resolved per request."""
    if bucket != config.storage_bucket():
        raise HTTPException(status_code=404, detail="Object not found")
    store = LocalBucket(config.storage_root(), bucket)
    try:
        path = store.local_file(object_path)
    except StorageError:
        logger.warning("Rejected object path bucket=%s path=%s", bucket, object_path)
        raise HTTPException(status_code=404, detail="Object not found")
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="Object not found")
    return FileResponse(path)
