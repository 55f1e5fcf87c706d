"""Resize shipping documents (PDF) to a target page size or by a scale factor."""

import logging
import math
from io import BytesIO
from typing import Any, Optional, Tuple, Union

import httpx
from pypdf import PdfReader, PdfWriter, Transformation

from ..errors import DocumentError
from ..models.document_models import (
    PageSizeMm,
    PageSizePoints,
    PdfResizeMetadata,
    PdfResizeResult,
)

logger = logging.getLogger("tiktok_shop_adapter.pdf")

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72
DOCUMENT_TIMEOUT_SECONDS = 15.0
PDF_MAGIC = b"%PDF"


def millimeters_to_points(mm: float) -> float:
    return mm / MM_PER_INCH * POINTS_PER_INCH


def points_to_millimeters(points: float) -> float:
    return points / POINTS_PER_INCH * MM_PER_INCH


def _positive(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


class PdfService:
    """
    Downloads a PDF over HTTPS and re-lays each page on a new page size.

    With a target size every page is scaled to fit (aspect ratio kept) and
    centred. With a scale factor the page size itself is multiplied.
    Failures raise DocumentError tagged with the stage that failed.
    """

    service_name = "pdf"

    def __init__(self, client: Optional[Any] = None, timeout: float = DOCUMENT_TIMEOUT_SECONDS):
        self.timeout = timeout
        if client is not None:
            self.client = client
            self._owns_client = False
        else:
            self.client = httpx.AsyncClient(
                timeout=timeout,
                headers={"Accept": "application/pdf"},
                follow_redirects=True,
            )
            self._owns_client = True

    async def close(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def resize_from_url(
        self,
        source_url: str,
        target_page_size: Optional[Union[PageSizeMm, dict]] = None,
        scale: Optional[float] = None,
        dpi: Optional[int] = None,
    ) -> PdfResizeResult:
        """
        Download and resize a PDF.

        Args:
            source_url: HTTPS URL of the source document
            target_page_size: Target size in millimetres (``width_mm``/``height_mm``)
            scale: Scale factor, mutually exclusive with ``target_page_size``
            dpi: Informational, echoed in the metadata

        Returns:
            PdfResizeResult with the new document bytes and metadata
        """
        target = self._validate(source_url, target_page_size, scale)
        source = await self._download(source_url.strip())
        content, page_count, size_points = self._resize(source, target, scale)

        metadata = PdfResizeMetadata(
            page_count=page_count,
            final_page_size_points=size_points,
            final_page_size_mm=PageSizeMm(
                width_mm=points_to_millimeters(size_points.width),
                height_mm=points_to_millimeters(size_points.height),
            ),
            dpi=dpi,
            original_size_bytes=len(source),
        )
        logger.info(
            "pdf_resized",
            extra={"page_count": page_count, "original_size_bytes": len(source), "size_bytes": len(content)},
        )
        return PdfResizeResult(content=content, metadata=metadata)

    def _validate(
        self,
        source_url: str,
        target_page_size: Optional[Union[PageSizeMm, dict]],
        scale: Optional[float],
    ) -> Optional[PageSizeMm]:
        if not source_url or not source_url.strip():
            raise DocumentError("PdfService requires a non-empty HTTPS source_url.", "validate")

        try:
            url = httpx.URL(source_url.strip())
        except httpx.InvalidURL as exc:
            raise DocumentError(f"PdfService received an invalid URL: {source_url}", "validate") from exc
        if url.scheme != "https" or not url.host:
            raise DocumentError("PdfService only supports HTTPS source URLs.", "validate")

        if target_page_size is not None and scale is not None:
            raise DocumentError("Provide either target_page_size or scale, not both.", "validate")
        if target_page_size is None and scale is None:
            raise DocumentError(
                "PdfService requires either target_page_size or scale to resize the document.",
                "validate",
            )

        target: Optional[PageSizeMm] = None
        if target_page_size is not None:
            try:
                target = (
                    target_page_size
                    if isinstance(target_page_size, PageSizeMm)
                    else PageSizeMm.model_validate(target_page_size)
                )
            except ValueError as exc:
                raise DocumentError(
                    "target_page_size width_mm and height_mm must be positive numbers.", "validate"
                ) from exc
            if not (_positive(target.width_mm) and _positive(target.height_mm)):
                raise DocumentError(
                    "target_page_size width_mm and height_mm must be positive numbers.", "validate"
                )

        if scale is not None and not _positive(scale):
            raise DocumentError("scale must be a positive number.", "validate")

        return target

    async def _download(self, source_url: str) -> bytes:
        try:
            response = await self.client.get(source_url, timeout=self.timeout)
        except httpx.HTTPError as exc:
            raise DocumentError(f"Failed to download PDF from {source_url}.", "download") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise DocumentError(
                f"PDF download failed with status {response.status_code}.",
                "download",
                status=response.status_code,
            )

        content_type = response.headers.get("content-type")
        if content_type and "application/pdf" not in content_type.lower():
            raise DocumentError(
                f"Expected application/pdf content-type but received {content_type}.", "validate"
            )

        content = response.content
        if not content.startswith(PDF_MAGIC):
            raise DocumentError("Source document is not a valid PDF.", "validate")
        return content

    @staticmethod
    def _resolve_dimensions(
        width: float,
        height: float,
        target: Optional[PageSizeMm],
        scale: Optional[float],
    ) -> Tuple[float, float, float]:
        if scale is not None:
            return width * scale, height * scale, scale
        if target is None:
            return width, height, 1.0
        target_width = millimeters_to_points(target.width_mm)
        target_height = millimeters_to_points(target.height_mm)
        return target_width, target_height, min(target_width / width, target_height / height)

    def _resize(
        self,
        source: bytes,
        target: Optional[PageSizeMm],
        scale: Optional[float],
    ) -> Tuple[bytes, int, PageSizePoints]:
        first_size: Optional[PageSizePoints] = None
        try:
            reader = PdfReader(BytesIO(source))
            writer = PdfWriter()
            for page in reader.pages:
                box = page.mediabox
                width, height = float(box.width), float(box.height)
                target_width, target_height, factor = self._resolve_dimensions(width, height, target, scale)

                offset_x = (target_width - width * factor) / 2
                offset_y = (target_height - height * factor) / 2
                transform = (
                    Transformation()
                    .translate(tx=-float(box.left), ty=-float(box.bottom))
                    .scale(factor)
                    .translate(tx=offset_x, ty=offset_y)
                )

                new_page = writer.add_blank_page(width=target_width, height=target_height)
                new_page.merge_transformed_page(page, transform)

                if first_size is None:
                    first_size = PageSizePoints(width=target_width, height=target_height)
            page_count = len(reader.pages)
        except DocumentError:
            raise
        except Exception as exc:
            raise DocumentError("Failed to resize PDF document.", "resize") from exc

        if first_size is None:
            first_size = PageSizePoints(
                width=millimeters_to_points(target.width_mm) if target else 0.0,
                height=millimeters_to_points(target.height_mm) if target else 0.0,
            )

        try:
            buffer = BytesIO()
            writer.write(buffer)
        except Exception as exc:
            raise DocumentError("Failed to write resized PDF document.", "output") from exc

        return buffer.getvalue(), page_count, first_size
