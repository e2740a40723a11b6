"""Document extraction endpoints."""

import base64
import logging

from fastapi import APIRouter, File, UploadFile

from freightdesk.core.deps import ExtractionServiceDep
from freightdesk.core.errors import FreightDeskError, MissingDocumentError
from freightdesk.schemas.common import ErrorResponse
from freightdesk.schemas.extraction import ExtractedShipment, ExtractionRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@router.post("", response_model=ExtractedShipment)
async def extract_document(
    data: ExtractionRequest,
    service: ExtractionServiceDep,
) -> ExtractedShipment:
    """Extract shipment fields from document text or a base64 image.

    The image wins when both are supplied.
    """
    if data.image_base64:
        return await service.extract_from_image(data.image_base64, data.mime_type)
    if data.document_text:
        return await service.extract_from_text(data.document_text)
    raise MissingDocumentError("No document provided")


@router.post("/upload", response_model=ExtractedShipment)
async def extract_upload(
    service: ExtractionServiceDep,
    file: UploadFile = File(...),
) -> ExtractedShipment:
    """Extract shipment fields from an uploaded PDF, image, or text file."""
    content = await file.read()
    if not content:
        raise MissingDocumentError("No document provided")
    if len(content) > MAX_UPLOAD_BYTES:
        raise FreightDeskError("File too large. Maximum size is 10MB.", status_code=413)

    content_type = (file.content_type or "").lower()
    filename = (file.filename or "").lower()
    logger.info("Extracting from upload %s (%s, %d bytes)", filename, content_type, len(content))

    if content_type == "application/pdf" or filename.endswith(".pdf"):
        return await service.extract_from_pdf(content)
    if content_type.startswith("image/"):
        encoded = base64.b64encode(content).decode("ascii")
        return await service.extract_from_image(encoded, content_type)
    if content_type.startswith("text/") or filename.endswith(".txt"):
        return await service.extract_from_text(content.decode("utf-8", errors="replace"))

    raise FreightDeskError(
        f"Unsupported file type: {file.content_type or 'unknown'}", status_code=415
    )
