"""
Receipt API Endpoints - Upload receipt files.

Implements:
- POST /api/v1/receipts - Store a receipt and return its URL

The returned URL is passed as receipt_url when recording a cost.
"""
from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel

from crewcost.models import User
from crewcost.domain.exceptions import DomainError
from crewcost.infrastructure.receipt_storage import LocalReceiptStore, ReceiptStore
from crewcost.api.v1.auth import get_current_active_user
from crewcost.api.v1.errors import to_http_exception

router = APIRouter()


class ReceiptResponse(BaseModel):
    url: str


def get_receipt_store() -> ReceiptStore:
    """Receipt storage dependency; override in tests."""
    return LocalReceiptStore()


@router.post(
    "",
    response_model=ReceiptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a receipt"
)
def upload_receipt(
    file: UploadFile = File(...),
    store: ReceiptStore = Depends(get_receipt_store),
    current_user: User = Depends(get_current_active_user)
):
    # One byte past the limit is enough for the store to reject the upload
    data = file.file.read(store.max_bytes + 1)
    try:
        url = store.save(file.filename or "receipt", file.content_type or "", data)
    except DomainError as e:
        raise to_http_exception(e)
    return ReceiptResponse(url=url)
