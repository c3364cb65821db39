import base64

import pytest

from planner.services.document_extractor import (
    extract_page_texts,
    extract_text_from_pdf,
    is_supported_transcript,
    join_pages,
    open_pdf,
    render_page_images,
)
from planner.services.errors import DocumentDecodeError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_page_texts_are_in_page_order(pdf_factory):
    with open_pdf(pdf_factory(["Fall 2023", "Spring 2024", "Fall 2024"])) as document:
        pages = extract_page_texts(document)
    assert len(pages) == 3
    assert "Fall 2023" in pages[0]
    assert "Spring 2024" in pages[1]
    assert "Fall 2024" in pages[2]


def test_join_pages_uses_newlines():
    assert join_pages(["a", "b", "c"]) == "a\nb\nc"


def test_extract_text_from_pdf(pdf_factory):
    text = extract_text_from_pdf(pdf_factory(["CS 46A Intro to Programming A 4.0", "MATH 30 Calculus B 3.0"]))
    assert text.index("CS 46A") < text.index("MATH 30")


@pytest.mark.parametrize("content", [b"", b"%PDF-garbage", b"\x00\x01\x02"])
def test_invalid_bytes_raise_decode_error(content):
    with pytest.raises(DocumentDecodeError):
        open_pdf(content)


def test_render_page_images_returns_one_png_per_page(pdf_factory):
    with open_pdf(pdf_factory(["one", "two"])) as document:
        images = render_page_images(document, scale=0.5)
    assert len(images) == 2
    assert all(base64.b64decode(image).startswith(PNG_SIGNATURE) for image in images)


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("transcript.pdf", "application/pdf", True),
        ("TRANSCRIPT.PDF", "application/octet-stream", True),
        ("upload", "application/pdf", True),
        ("transcript.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", False),
        ("transcript.png", "image/png", False),
    ],
)
def test_only_pdf_is_supported(filename, content_type, expected):
    assert is_supported_transcript(filename, content_type) is expected
