"""Pydantic models for the PDF resize utility."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class PageSizeMm(BaseModel):
    """Page size in millimetres."""
    width_mm: float = Field(alias="widthMm")
    height_mm: float = Field(alias="heightMm")

    model_config = ConfigDict(populate_by_name=True)


class PageSizePoints(BaseModel):
    """Page size in PDF points (1/72 inch)."""
    width: float
    height: float


class PdfResizeRequest(BaseModel):
    """Input for PdfService.resize_from_url."""
    source_url: str = Field(alias="sourceUrl")
    target_page_size: Optional[PageSizeMm] = Field(None, alias="targetPageSize")
    scale: Optional[float] = None
    dpi: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class PdfResizeMetadata(BaseModel):
    """Facts about the resized document."""
    page_count: int = Field(alias="pageCount")
    final_page_size_mm: PageSizeMm = Field(alias="finalPageSizeMm")
    final_page_size_points: PageSizePoints = Field(alias="finalPageSizePoints")
    dpi: Optional[int] = None
    original_size_bytes: int = Field(alias="originalSizeBytes")

    model_config = ConfigDict(populate_by_name=True)


class PdfResizeResult(BaseModel):
    """Resized document bytes with metadata."""
    content: bytes
    metadata: PdfResizeMetadata

    model_config = ConfigDict(ser_json_bytes="base64")
