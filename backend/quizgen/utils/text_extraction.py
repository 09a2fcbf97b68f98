import io
import logging
from typing import Callable

import PyPDF2

from quizgen.errors import ExtractionEmptyResult, ExtractionParseError
from quizgen.models.document_models import ExtractedText, UploadedDocument

logger = logging.getLogger(__name__)

PdfReaderFn = Callable[[bytes], str]


def read_pdf_text(pdf_bytes: bytes) -> str:
    """Concatenate the text of every page; pages without a text layer add nothing."""
    with io.BytesIO(pdf_bytes) as stream:
        reader = PyPDF2.PdfReader(stream)
        return "".join((p.extract_text() or "") for p in reader.pages)


def extract_text(document: UploadedDocument, reader: PdfReaderFn = read_pdf_text) -> ExtractedText:
    """
    Turn an uploaded PDF into text.

    Raises ExtractionParseError when `reader` rejects the bytes and
    ExtractionEmptyResult when there is no usable text, including an empty
    upload. Neither is retried: a corrupt file will not parse the second time.
    """
    filename = document.filename or "<unnamed>"

    if not document.content:
        logger.warning("Upload %s is empty", filename)
        raise ExtractionEmptyResult(detail=f"{filename}: empty payload")

    try:
        raw_text = reader(document.content)
    except Exception as e:
        logger.error("Error parsing PDF %s: %s", filename, e)
        raise ExtractionParseError(detail=f"{filename}: {e}") from e

    if not raw_text or not raw_text.strip():
        logger.warning("No extractable text in %s (scanned or image-only?)", filename)
        raise ExtractionEmptyResult(detail=f"{filename}: no text layer")

    extracted = ExtractedText(text=raw_text)
    logger.info("Extracted %d characters from %s", extracted.length, filename)
    return extracted
