import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from receipt_api.config import Settings, get_settings
from receipt_api.errors import ProviderError, ReceiptError, UploadValidationError
from receipt_api.ratelimit import RATE_LIMIT, limiter
from receipt_api.receipt.base import ALLOWED_CONTENT_TYPES, ReceiptExtractor
from receipt_api.receipt.factory import get_receipt_extractor
from receipt_api.schemas import ProcessReceiptOut, ReceiptMetadata

logger = logging.getLogger("receipt_api")
router = APIRouter()

UPLOAD_FIELD = "receipt"


def raise_too_large(max_bytes: int):
    limit_mb = max_bytes // (1024 * 1024)
    raise UploadValidationError("File too large", f"Image too large. Maximum size is {limit_mb} MB.")


@router.post("/process-receipt")
@limiter.limit(RATE_LIMIT)
async def process_receipt(
    request: Request,
    settings: Settings = Depends(get_settings),
    extractor: ReceiptExtractor = Depends(get_receipt_extractor),
):
    try:
        form = await request.form()
    except StarletteHTTPException as e:
        raise UploadValidationError("Invalid form data", f"Could not parse multipart form: {e.detail}")

    upload = form.get(UPLOAD_FIELD)
    if not isinstance(upload, UploadFile):
        raise UploadValidationError(
            "Missing file",
            f'No receipt image file provided. Please upload a file with the field name "{UPLOAD_FIELD}"',
        )

    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        await upload.close()
        raise UploadValidationError("Invalid file type", "Please upload a valid image file (JPEG, PNG, or WebP)")

    # size is known once the multipart body is spooled; reject before loading it
    if upload.size is not None and upload.size > settings.max_upload_bytes:
        await upload.close()
        raise_too_large(settings.max_upload_bytes)

    image_bytes = await upload.read()
    # Drops the spooled temp file; nothing below needs it
    await upload.close()

    if len(image_bytes) == 0:
        raise UploadValidationError("Empty file", "The uploaded receipt image is empty")
    if len(image_bytes) > settings.max_upload_bytes:
        raise_too_large(settings.max_upload_bytes)

    try:
        data = await extractor.extract(image_bytes, upload.content_type)
    except ReceiptError as e:
        logger.error(
            f"Receipt extraction failed: {e}",
            exc_info=True,
            extra={"extra_data": {"kind": e.kind.value}},
        )
        raise
    except Exception as e:
        logger.error(f"Receipt extraction failed: {e}", exc_info=True)
        raise ProviderError(str(e)) from e

    items = data.get("items")
    logger.info(
        "Receipt processed",
        extra={"extra_data": {
            "items_count": len(items) if isinstance(items, list) else 0,
            "size": len(image_bytes),
            "mime_type": upload.content_type,
        }},
    )

    result = ProcessReceiptOut(
        data=data,
        metadata=ReceiptMetadata(
            original_filename=upload.filename,
            file_size=len(image_bytes),
            mime_type=upload.content_type,
            processed_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        ),
    )
    return result.model_dump(by_alias=True)


@router.options("/process-receipt", include_in_schema=False)
def process_receipt_preflight():
    return Response(status_code=200)
