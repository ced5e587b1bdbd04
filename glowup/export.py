"""PDF export of rasterized reports.

The client renders the report to a PNG; this module paginates it onto A4
pages with reportlab.
"""

from __future__ import annotations

import io
import re
from datetime import date
from typing import Sequence, Tuple

import structlog
from PIL import Image, UnidentifiedImageError
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .errors import ExportError
from .pagination import PageSlice, paginate

logger = structlog.get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/"]')


def export_filename(startup_name: str, artifact_label: str, on: date, extension: str = "pdf") -> str:
    """Return ``{startupName}_{Artifact_Label}_{YYYY-MM-DD}.{extension}``."""

    name = _UNSAFE_FILENAME_CHARS.sub("-", startup_name.strip()) or "Startup"
    label = artifact_label.strip().replace(" ", "_")
    return f"{name}_{label}_{on.isoformat()}.{extension}"


def load_image(image_bytes: bytes) -> Image.Image:
    """Decode the uploaded report image into an RGB Pillow image."""

    try:
        with Image.open(io.BytesIO(image_bytes)) as opened:
            opened.load()
            return opened.convert("RGB")
    except Image.DecompressionBombError as exc:
        raise ExportError("Report image is too large to export") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ExportError("Report image could not be decoded") from exc


def render_slices(slices: Sequence[PageSlice], page_size: Tuple[float, float] = A4, title: str | None = None) -> bytes:
    """Draw every slice on its own page and return the PDF bytes.

    Slice offsets are measured downward from the top of the page.
    """

    if not slices:
        raise ExportError("Nothing to export")

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=page_size)
    if title:
        pdf.setTitle(title)
    page_height = page_size[1]
    for page in slices:
        if page.dest_page_index:
            pdf.showPage()
        bottom = page_height - page.source_y_offset - page.height
        pdf.drawImage(page.source_image, 0, bottom, width=page.width, height=page.height)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def write_pdf(
    image_bytes: bytes,
    *,
    title: str | None = None,
    page_size: Tuple[float, float] = A4,
    keep_trailing_blank_page: bool = False,
) -> bytes:
    """Paginate a rasterized report onto fixed-size pages."""

    image = load_image(image_bytes)
    width_px, height_px = image.size
    page_width, page_height = page_size
    slices = paginate(
        height_px,
        width_px,
        page_width,
        page_height,
        image=ImageReader(image),
        keep_trailing_blank_page=keep_trailing_blank_page,
    )
    logger.info("report_paginated", pages=len(slices), source_width=width_px, source_height=height_px)
    return render_slices(slices, page_size=page_size, title=title)
