from io import BytesIO

import pdfplumber


def _table_paragraph(tables) -> str:
    """Flatten one page's tables: cells joined by ' | ', rows by '; ', blank rows dropped."""
    rows = (" | ".join((cell or "").strip() for cell in row) for table in tables for row in table)
    return "; ".join(row for row in rows if row.strip(" |"))


def _page_sections(page):
    yield (page.extract_text() or "").strip()
    yield _table_paragraph(page.extract_tables() or [])


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """Document text of an uploaded PDF, page by page, tables after their page's text."""
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        sections = [s for page in pdf.pages for s in _page_sections(page) if s]
    return "\n\n".join(sections)
