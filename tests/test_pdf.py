from io import BytesIO

import httpx
import pytest
from pypdf import PdfReader, PdfWriter

from tiktok_shop_adapter.errors import DocumentError, ErrorKind
from tiktok_shop_adapter.services import PdfService
from tiktok_shop_adapter.services.pdf import millimeters_to_points

SOURCE_URL = "https://documents.test/label.pdf"


def sample_pdf(pages=2, width=612, height=792):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=width, height=height)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def make_service(content=None, status_code=200, content_type="application/pdf"):
    def handler(request):
        return httpx.Response(
            status_code,
            content=content if content is not None else sample_pdf(),
            headers={"content-type": content_type},
        )

    return PdfService(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_resize_to_target_page_size():
    source = sample_pdf()
    service = make_service(source)

    result = await service.resize_from_url(SOURCE_URL, target_page_size={"width_mm": 100, "height_mm": 150}, dpi=300)

    meta = result.metadata
    assert meta.page_count == 2
    assert meta.dpi == 300
    assert meta.original_size_bytes == len(source)
    assert meta.final_page_size_mm.width_mm == pytest.approx(100)
    assert meta.final_page_size_mm.height_mm == pytest.approx(150)
    assert meta.final_page_size_points.width == pytest.approx(millimeters_to_points(100))

    reader = PdfReader(BytesIO(result.content))
    assert len(reader.pages) == 2
    assert float(reader.pages[0].mediabox.width) == pytest.approx(millimeters_to_points(100), abs=0.01)


@pytest.mark.asyncio
async def test_resize_by_scale():
    service = make_service()

    result = await service.resize_from_url(SOURCE_URL, scale=0.5)

    assert result.metadata.final_page_size_points.width == pytest.approx(306)
    assert result.metadata.final_page_size_points.height == pytest.approx(396)


def test_metadata_serializes_with_camel_case_aliases():
    from tiktok_shop_adapter.models.document_models import PageSizeMm

    size = PageSizeMm(widthMm=100, heightMm=150)
    assert size.model_dump(by_alias=True) == {"widthMm": 100, "heightMm": 150}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"source_url": "http://documents.test/label.pdf", "scale": 1},
        {"source_url": "", "scale": 1},
        {"source_url": SOURCE_URL},
        {"source_url": SOURCE_URL, "scale": 1, "target_page_size": {"width_mm": 1, "height_mm": 1}},
        {"source_url": SOURCE_URL, "scale": -1},
        {"source_url": SOURCE_URL, "target_page_size": {"width_mm": 0, "height_mm": 10}},
    ],
)
async def test_invalid_input_fails_validation(kwargs):
    service = make_service()

    with pytest.raises(DocumentError) as exc_info:
        await service.resize_from_url(**kwargs)

    assert exc_info.value.kind == ErrorKind.DOCUMENT
    assert exc_info.value.stage == "validate"


@pytest.mark.asyncio
async def test_download_status_error():
    service = make_service(content=b"missing", status_code=404, content_type="text/plain")

    with pytest.raises(DocumentError) as exc_info:
        await service.resize_from_url(SOURCE_URL, scale=1)

    assert exc_info.value.stage == "download"
    assert exc_info.value.status == 404


@pytest.mark.asyncio
async def test_download_transport_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    service = PdfService(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    with pytest.raises(DocumentError) as exc_info:
        await service.resize_from_url(SOURCE_URL, scale=1)

    assert exc_info.value.stage == "download"


@pytest.mark.asyncio
async def test_non_pdf_content_is_rejected():
    service = make_service(content=b"<html></html>", content_type="text/html")

    with pytest.raises(DocumentError) as exc_info:
        await service.resize_from_url(SOURCE_URL, scale=1)
    assert exc_info.value.stage == "validate"

    service = make_service(content=b"not a pdf", content_type="application/pdf")
    with pytest.raises(DocumentError) as exc_info:
        await service.resize_from_url(SOURCE_URL, scale=1)
    assert exc_info.value.stage == "validate"


def test_document_error_rejects_unknown_stage():
    with pytest.raises(ValueError):
        DocumentError("boom", "upload")
