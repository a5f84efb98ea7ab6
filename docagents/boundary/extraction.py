"""
Upload text extraction.

Plain text is decoded as UTF-8; PDFs are read page by page with pypdf.
A PDF that cannot be parsed falls back to its raw bytes decoded as text so
an upload is never rejected only because extraction failed.

Dependencies: pypdf
System role: Converts uploaded bytes into pipeline text
"""

import io
import logging
from pathlib import Path

from pypdf import PdfReader

logger = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain"
APPLICATION_PDF = "application/pdf"

SUPPORTED_CONTENT_TYPES = frozenset({TEXT_PLAIN, APPLICATION_PDF})
_EXTENSION_TYPES = {".txt": TEXT_PLAIN, ".pdf": APPLICATION_PDF}


def resolve_content_type(filename: str, content_type: str | None = None) -> str | None:
    """
    Decide the upload type from the declared content type or the extension.

    The extension is consulted only when no content type was declared; a
    declared type outside text/plain and application/pdf is unsupported.

    Returns:
        str | None: text/plain, application/pdf, or None when unsupported
    """
    if content_type:
        base_type = content_type.split(";", 1)[0].strip().lower()
        return base_type if base_type in SUPPORTED_CONTENT_TYPES else None
    return _EXTENSION_TYPES.get(Path(filename).suffix.lower())


class TextExtractor:
    """Extract text from supported upload types."""

    def extract(self, content: bytes, content_type: str) -> str:
        """
        Extract text from upload bytes.

        Args:
            content: Raw upload
            content_type: Resolved type from resolve_content_type()

        Returns:
            str: Extracted text
        """
        if content_type == APPLICATION_PDF:
            return self._extract_pdf(content)
        return content.decode("utf-8", errors="replace")

    def _extract_pdf(self, content: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(content))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            logger.warning(
                f"{__name__}:_extract_pdf - PDF extraction failed, using raw bytes",
                extra={"size": len(content), "error": str(e)},
            )
            return content.decode("utf-8", errors="replace")

        text = "\n".join(page for page in pages if page)
        if not text.strip():
            logger.warning(
                f"{__name__}:_extract_pdf - PDF has no extractable text",
                extra={"pages": len(pages)},
            )
        return text
