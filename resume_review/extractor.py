import io
import logging

import docx
import pdfplumber

from .errors import UnsupportedFileType

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MSWORD = "application/msword"

SUPPORTED_TYPES = (PDF, DOCX, MSWORD)


class ExtractionError(Exception):
    """The document library could not parse the uploaded bytes."""


def is_supported(media_type) -> bool:
    return media_type in SUPPORTED_TYPES


# ✅ Extract text from PDF
def extract_text_from_pdf(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        pages = [page.extract_text() for page in pdf.pages]
    return "\n".join(text for text in pages if text)


# ✅ Extract text from DOCX (paragraphs first, then table cells)
def extract_text_from_docx(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    lines = [para.text for para in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.extend(cell.text for cell in row.cells)
    return "\n".join(lines)


def extract_text(data: bytes, media_type: str) -> str:
    """Return the plain text of a resume given its bytes and declared media type.

    Raises UnsupportedFileType for anything that is not PDF or Word, and
    ExtractionError when the parser itself fails. Whitespace-only text is
    returned unchanged; rejecting it is up to the caller.
    """
    if media_type == PDF:
        reader = extract_text_from_pdf
    elif media_type in (DOCX, MSWORD):
        reader = extract_text_from_docx
    else:
        raise UnsupportedFileType(media_type)

    try:
        text = reader(data)
    except Exception as e:
        logger.error("Text extraction failed for %s: %s", media_type, e)
        raise ExtractionError(str(e) or e.__class__.__name__) from e

    logger.info("Extracted %d characters from %s upload", len(text), media_type)
    return text
