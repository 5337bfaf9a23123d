"""PDF generation service using xhtml2pdf."""

from __future__ import annotations

import base64
import io
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.services.errors import NotFoundError
from repairflow.services.phases import phase_label

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
)


def _encode_image_file(path: str) -> str:
    """Read an image file and return base64-encoded string."""
    full_path = Path(path)
    if not path or not full_path.exists():
        return ""
    return base64.standard_b64encode(full_path.read_bytes()).decode("utf-8")


def render_phase_report_html(context: dict) -> str:
    return _env.get_template("phase_report.html.j2").render(**context)


def html_to_pdf(html: str) -> bytes:
    from xhtml2pdf import pisa

    pdf_buffer = io.BytesIO()
    pisa_status = pisa.CreatePDF(io.StringIO(html), dest=pdf_buffer)
    if pisa_status.err:
        raise RuntimeError(f"PDF generation failed with {pisa_status.err} errors")
    return pdf_buffer.getvalue()


async def build_pdf_context(db: AsyncSession, report_id: str) -> dict:
    """Template variables for one phase report."""
    report = await crud.get_phase_report(db, report_id)
    if not report:
        raise NotFoundError("Phase report not found")

    wo = await crud.get_work_order(db, report.work_order_id)
    unit = wo.equipment_unit if wo else None
    model = unit.equipment_model if unit else None
    technician = await crud.get_user(db, report.created_by)

    photos = []
    for p in report.photos or []:
        photos.append({
            "caption": p.get("caption", ""),
            "photo_type": p.get("photo_type", ""),
            "b64": _encode_image_file(p.get("storage_path", "")),
        })

    return {
        "report": report,
        "work_order": wo,
        "customer": wo.customer if wo else None,
        "unit": unit,
        "model": model,
        "technician": technician,
        "phase_label": phase_label(report.phase),
        "photos": photos,
        "report_date": datetime.now(timezone.utc).strftime("%B %d, %Y"),
    }


async def generate_phase_report_pdf(db: AsyncSession, report_id: str) -> bytes:
    """Render a phase report to PDF bytes."""
    context = await build_pdf_context(db, report_id)
    return html_to_pdf(render_phase_report_html(context))


def render_quote_html(context: dict) -> str:
    return _env.get_template("quote.html.j2").render(**context)


async def build_quote_context(db: AsyncSession, quote_id: str) -> dict:
    quote = await crud.get_quote(db, quote_id)
    if not quote:
        raise NotFoundError("Quote not found")
    wo = await crud.get_work_order(db, quote.work_order_id)
    unit = wo.equipment_unit if wo else None
    return {
        "quote": quote,
        "work_order": wo,
        "customer": wo.customer if wo else None,
        "unit": unit,
        "model": unit.equipment_model if unit else None,
        "quote_date": quote.created_at.strftime("%B %d, %Y"),
    }


async def generate_quote_pdf(db: AsyncSession, quote_id: str) -> bytes:
    context = await build_quote_context(db, quote_id)
    return html_to_pdf(render_quote_html(context))
