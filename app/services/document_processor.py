import fitz  # PyMuPDF
from docx import Document
import logging
from pathlib import Path
from starlette.concurrency import run_in_threadpool

from app.utils.exceptions import ProcessingError

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """Extracts plain text from uploaded PDF/DOCX files"""

    async def extract_text(self, file_path: str) -> str:
        """
        Extract the full text of a document

        Args:
            file_path: Path to PDF or DOCX file

        Returns:
            Extracted text (may be empty for scanned documents)
        """
        file_ext = Path(file_path).suffix.lower()

        if file_ext == '.pdf':
            extractor = self._extract_pdf
        elif file_ext == '.docx':
            extractor = self._extract_docx
        else:
            raise ProcessingError("Processing failed", detail=f"Unsupported file format: {file_ext}")

        # PyMuPDF and python-docx are blocking
        text = await run_in_threadpool(extractor, file_path)
        logger.info(f"[OK] Extracted {len(text)} characters from {Path(file_path).name}")
        return text

    def _extract_pdf(self, pdf_path: str) -> str:
        try:
            with fitz.open(pdf_path) as doc:
                pages = [page.get_text("text") for page in doc]
                logger.info(f"PDF has {len(pages)} pages")
        except Exception as e:
            raise ProcessingError("Processing failed", detail=f"PDF processing error: {str(e)}") from e

        return "\n".join(pages)

    def _extract_docx(self, docx_path: str) -> str:
        try:
            doc = Document(docx_path)
        except Exception as e:
            raise ProcessingError("Processing failed", detail=f"DOCX processing error: {str(e)}") from e

        return "\n".join(para.text for para in doc.paragraphs)
