"""Single-shot field extraction from freight documents.

One model call per document, no tools and no loop. The model is told to
answer with a bare JSON object; anything that does not parse into
``ExtractedShipment`` is an ``ExtractionError``, never a partial record.
"""

import json
import logging
import re
from typing import Any

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from freightdesk.core.config import settings
from freightdesk.core.errors import ExtractionError
from freightdesk.schemas.extraction import ExtractedShipment
from freightdesk.services.pdf_service import extract_text_from_pdf

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"

FIELDS_INSTRUCTION = """Return ONLY a JSON object with these fields (use null for any field you cannot find):
{
  "origin_city": string,
  "origin_state": string (2-letter code),
  "destination_city": string,
  "destination_state": string (2-letter code),
  "shipper_name": string,
  "consignee_name": string,
  "weight": number (in lbs, no commas),
  "po_number": string,
  "pickup_date": string (YYYY-MM-DD format)
}

Return ONLY the JSON object, no other text."""

IMAGE_PROMPT = f"""Extract shipping information from this freight document (BOL, rate confirmation, or similar).

{FIELDS_INSTRUCTION}"""

TEXT_PROMPT_TEMPLATE = """Extract shipping information from this freight document text:

---
{document_text}
---

{fields_instruction}"""


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    content = re.sub(r"^```(?:json)?\s*\n?", "", content.strip())
    content = re.sub(r"\n?```\s*$", "", content.strip())
    return content.strip()


def parse_extraction(content: str) -> ExtractedShipment:
    """Parse the model's reply into a complete nine-field record.

    Raises:
        ExtractionError: If the reply is empty, not JSON, or not an object.
    """
    text = strip_code_fences(content)
    if not text:
        raise ExtractionError("No response from AI")

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse extraction response: %s", text[:500])
        raise ExtractionError(f"Extraction failed: model returned invalid JSON ({e.msg})") from e

    if not isinstance(parsed, dict):
        raise ExtractionError("Extraction failed: expected a JSON object")

    try:
        return ExtractedShipment.model_validate(parsed)
    except ValidationError as e:
        raise ExtractionError(f"Extraction failed: {e.error_count()} invalid field(s)") from e


class ExtractionService:
    """Pulls shipment fields out of document text, images, or PDFs."""

    def __init__(self, llm: Any | None = None) -> None:
        self.llm = llm or ChatOpenAI(
            model=settings.extraction_model,
            api_key=settings.openai_api_key,
            temperature=0.0,
            max_tokens=settings.max_response_tokens,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    async def extract_from_text(self, document_text: str) -> ExtractedShipment:
        prompt = TEXT_PROMPT_TEMPLATE.format(
            document_text=document_text,
            fields_instruction=FIELDS_INSTRUCTION,
        )
        return await self._run(HumanMessage(content=prompt))

    async def extract_from_image(
        self,
        image_base64: str,
        mime_type: str | None = None,
    ) -> ExtractedShipment:
        data_url = f"data:{mime_type or DEFAULT_IMAGE_MIME_TYPE};base64,{image_base64}"
        message = HumanMessage(
            content=[
                {"type": "image_url", "image_url": {"url": data_url}},
                {"type": "text", "text": IMAGE_PROMPT},
            ]
        )
        return await self._run(message)

    async def extract_from_pdf(self, file_bytes: bytes) -> ExtractedShipment:
        """Extract from a PDF's text layer.

        Scanned PDFs without a text layer are rejected; upload them as images.
        """
        try:
            text = extract_text_from_pdf(file_bytes)
        except ValueError as e:
            raise ExtractionError(str(e)) from e
        except Exception as e:
            raise ExtractionError(f"Could not read PDF: {e}") from e
        return await self.extract_from_text(text)

    async def _run(self, message: HumanMessage) -> ExtractedShipment:
        try:
            response = await self.llm.ainvoke([message])
        except Exception as e:
            logger.exception("Extraction model call failed")
            raise ExtractionError(str(e) or "Extraction failed") from e

        content = response.content if isinstance(response.content, str) else ""
        if not content and isinstance(response.content, list):
            content = "".join(
                str(b.get("text", "")) for b in response.content
                if isinstance(b, dict) and b.get("type") == "text"
            )
        return parse_extraction(content)
