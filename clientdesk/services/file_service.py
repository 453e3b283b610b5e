import logging
import os
import time
import httpx
from storage3.utils import StorageException
from supabase import AsyncClient
from clientdesk.core.config import settings
from clientdesk.core.exceptions import StoreError
from clientdesk.core.request_queue import request_queue
from clientdesk.utils.logging import log_store_error

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "invoices"

def build_invoice_path(project_id: int, filename: str) -> str:
    """invoices/{project_id}-{timestamp_ms}-{filename}"""
    safe_name = os.path.basename(filename or "invoice.pdf").replace(" ", "_")
    return f"{INVOICE_PREFIX}/{project_id}-{int(time.time() * 1000)}-{safe_name}"

async def upload_invoice(
    supabase: AsyncClient,
    project_id: int,
    filename: str,
    content: bytes,
    content_type: str = "application/pdf"
) -> str:
    """
    Upload an invoice to storage and return its public URL.
    """
    path = build_invoice_path(project_id, filename)
    bucket = supabase.storage.from_(settings.STORAGE_BUCKET)

    try:
        await request_queue.add(
            lambda: bucket.upload(path=path, file=content, file_options={"content-type": content_type})
        )
        public_url = await bucket.get_public_url(path)
    except (StorageException, httpx.HTTPError) as e:
        log_store_error(f"Error uploading invoice for project {project_id}", e, logger)
        raise StoreError(f"Failed to upload invoice: {e}") from e

    logger.info(f"Invoice uploaded for project {project_id}: {path}")
    return public_url
