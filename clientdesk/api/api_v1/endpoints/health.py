from fastapi import APIRouter
from clientdesk.core.request_queue import request_queue

router = APIRouter()

@router.get("")
async def health_check():
    return {
        "status": "ok",
        "message": "API is running",
        "queue": {
            "active": request_queue.active_count,
            "pending": request_queue.pending_count,
        },
    }
