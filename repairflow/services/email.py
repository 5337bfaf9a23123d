"""Email service using Resend API."""

from __future__ import annotations

import base64
import logging

from repairflow.config import get_settings
from repairflow.models import PhaseReport
from repairflow.services.phases import phase_label

logger = logging.getLogger(__name__)

_settings = get_settings()


def _send(to: str, subject: str, html: str, attachments: list[dict] | None = None) -> bool:
    """Send an email via Resend. Returns True on success."""
    if not _settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set; email to %s not sent: %s", to, subject)
        return False

    import resend
    resend.api_key = _settings.resend_api_key

    params = {
        "from": "RepairFlow <reports@repairflow.app>",
        "to": [to],
        "subject": subject,
        "html": html,
    }
    if attachments:
        params["attachments"] = attachments

    try:
        resend.Emails.send(params)
        return True
    except Exception:
        logger.exception("Failed to send email to %s", to)
        return False


def send_phase_report_email(to: str, work_order_number: str, report: PhaseReport, pdf: bytes) -> bool:
    """Send a phase report PDF to the customer."""
    label = phase_label(report.phase)
    html = f"""
    <h2>{label} report for work order {work_order_number}</h2>
    <p>{report.summary}</p>
    <p>The full report, including measurements and photos, is attached.</p>
    """
    return _send(
        to,
        f"{work_order_number}: {label} report",
        html,
        attachments=[{
            "filename": f"{work_order_number}-{report.phase}.pdf",
            "content": base64.b64encode(pdf).decode("ascii"),
        }],
    )
