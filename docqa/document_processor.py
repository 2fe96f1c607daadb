"""Document processing module: text blocks for indexing and term locations for highlighting."""

import io
import json
import logging
from typing import BinaryIO, Dict, Iterable, List, Union

import fitz  # PyMuPDF
from pypdf import PdfReader

from docqa.errors import DocumentLoadError, InvalidArgumentError
from docqa.models.bounds import LocatedTerm, Rectangle

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
TEXT_MEDIA_TYPE = "text/plain"

DocumentSource = Union[bytes, bytearray, BinaryIO]


def _read_bytes(data: DocumentSource) -> bytes:
    if data is None:
        raise InvalidArgumentError("Document stream cannot be null.")
    if hasattr(data, "read"):
        data = data.read()
    return bytes(data)


def page_block(page_number: int, text: str) -> str:
    """Label page text so answers can cite page numbers."""
    return f"... Page {page_number} ...\n{text}"


class DocumentProcessor:
    """Extracts text blocks from uploaded documents and locates terms on PDF pages."""

    def extract(self, data: DocumentSource, media_type: str = PDF_MEDIA_TYPE) -> List[str]:
        """
        Extract ordered text blocks from a document.

        For PDFs the blocks are an annotation dump, a form-field dump, then one
        block per page with text. Each part is extracted independently, so a
        broken annotation table or page does not lose the rest of the document.

        Args:
            data: Document bytes or a binary stream.
            media_type: Declared media type ("application/pdf" or "text/plain").

        Returns:
            Ordered list of raw text blocks.
        """
        content = _read_bytes(data)
        kind = (media_type or "").split(";")[0].strip().lower()

        if kind == PDF_MEDIA_TYPE:
            return self._extract_from_pdf(content)
        elif kind == TEXT_MEDIA_TYPE:
            return self._extract_from_txt(content)
        else:
            raise InvalidArgumentError(f"Unsupported media type: {media_type}. Only PDF and plain text are supported.")

    def extract_pages(self, data: DocumentSource) -> Dict[int, str]:
        """Return labelled page blocks keyed by 1-based page number."""
        reader = self._open_pdf(_read_bytes(data))
        return {number: block for number, block in self._page_blocks(reader)}

    def _open_pdf(self, content: bytes) -> PdfReader:
        try:
            reader = PdfReader(io.BytesIO(content))
            # Lenient parsing defers a missing catalog until the page tree is read
            len(reader.pages)
            return reader
        except Exception as e:
            raise DocumentLoadError(f"Failed to load PDF document: {e}") from e

    def _extract_from_pdf(self, content: bytes) -> List[str]:
        """Extract annotations, form fields and page text with pypdf."""
        reader = self._open_pdf(content)
        blocks: List[str] = []

        annotations = self._extract_annotations(reader)
        if annotations:
            blocks.append(f"Annotations: {annotations}")

        form_fields = self._extract_form_fields(reader)
        if form_fields:
            blocks.append(f"Form fields: {form_fields}")

        blocks.extend(block for _, block in self._page_blocks(reader))
        logger.info("Extracted %d text blocks from %d PDF pages", len(blocks), len(reader.pages))
        return blocks

    def _extract_annotations(self, reader: PdfReader) -> str:
        try:
            annotations = []
            for index, page in enumerate(reader.pages):
                for ref in page.get("/Annots") or []:
                    annot = ref.get_object()
                    contents = annot.get("/Contents")
                    if not contents:
                        continue
                    annotations.append({
                        "page": index + 1,
                        "type": str(annot.get("/Subtype", "")).lstrip("/"),
                        "contents": str(contents),
                    })
            return json.dumps(annotations, ensure_ascii=False) if annotations else ""
        except Exception as e:
            logger.warning("Annotation extraction failed, continuing without them: %s", e)
            return ""

    def _extract_form_fields(self, reader: PdfReader) -> str:
        try:
            fields = reader.get_fields() or {}
            values = {
                name: "" if field.get("/V") is None else str(field.get("/V"))
                for name, field in fields.items()
            }
            return json.dumps(values, ensure_ascii=False) if values else ""
        except Exception as e:
            logger.warning("Form field extraction failed, continuing without them: %s", e)
            return ""

    def _page_blocks(self, reader: PdfReader):
        for index, page in enumerate(reader.pages):
            number = index + 1
            try:
                text = page.extract_text() or ""
            except Exception as e:
                logger.warning("Text extraction failed for page %d: %s", number, e)
                yield number, page_block(number, "[Text extraction failed]")
                continue
            if text.strip():
                yield number, page_block(number, text)

    def _extract_from_txt(self, content: bytes) -> List[str]:
        """Extract text from plain text bytes."""
        text = content.decode("utf-8", errors="replace").strip()
        return [text] if text else []

    def locate(self, data: DocumentSource, terms: Iterable[str]) -> Dict[int, List[LocatedTerm]]:
        """
        Find every occurrence of each term on each PDF page.

        Args:
            data: PDF bytes or a binary stream.
            terms: Terms to search for; blank terms are ignored.

        Returns:
            LocatedTerm lists keyed by zero-based page index, in point units.
        """
        if terms is None:
            raise InvalidArgumentError("Terms to locate cannot be null.")
        content = _read_bytes(data)
        try:
            doc = fitz.open(stream=content, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(f"Failed to open PDF for text search: {e}") from e

        located: Dict[int, List[LocatedTerm]] = {}
        with doc:
            for term in terms:
                if not term or not term.strip():
                    continue
                try:
                    for page in doc:
                        for r in page.search_for(term):
                            located.setdefault(page.number, []).append(
                                LocatedTerm(
                                    term=term,
                                    page=page.number,
                                    rectangle=Rectangle(
                                        x=float(r.x0), y=float(r.y0),
                                        width=float(r.width), height=float(r.height),
                                    ),
                                )
                            )
                except Exception as e:
                    logger.warning("Search failed for term %r, continuing with the rest: %s", term, e)
        return located
