"""
Document Service — Project summary documents (PDF, CSV, TXT) on local disk.

Each project owns a folder under PROJECTS_DIR named after its title; the most
recently generated document's path is stored on the project.
"""
import csv
import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas

from app.config import Settings
from app.utils.dates import utcnow
from app.utils.validators import sanitize_folder_name

logger = logging.getLogger(__name__)


def _fmt(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


class DocumentGenerator:
    """Writes project documents and manages project folders."""

    def __init__(self, base_dir: str, allowed_formats: Iterable[str]):
        self.base_dir = base_dir
        self.allowed_formats = tuple(allowed_formats)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DocumentGenerator":
        return cls(settings.PROJECTS_DIR, settings.ALLOWED_FILE_FORMATS)

    # ─── Folders ─────────────────────────────────────────────────────

    def folder_for(self, title: str) -> str:
        return os.path.join(self.base_dir, sanitize_folder_name(title))

    def create_project_folder(self, title: str) -> str:
        folder = self.folder_for(title)
        os.makedirs(folder, exist_ok=True)
        return folder

    def rename_project_folder(self, old_title: str, new_title: str) -> Optional[str]:
        """Move the folder for `old_title` to `new_title`. Returns None if there was none."""
        old_folder = self.folder_for(old_title)
        if not os.path.isdir(old_folder):
            return None
        new_folder = self.folder_for(new_title)
        if old_folder != new_folder:
            os.makedirs(os.path.dirname(new_folder), exist_ok=True)
            os.replace(old_folder, new_folder)
        return new_folder

    def delete_existing(self, path: Optional[str]) -> None:
        """Remove a previously generated document; missing files are ignored."""
        if path and os.path.isfile(path):
            os.remove(path)
            logger.info("Deleted old project file %s", path)

    # ─── Generation ──────────────────────────────────────────────────

    def generate(self, snapshot: Dict[str, Any], file_format: str, folder: str) -> str:
        """Render `snapshot` into `folder` and return the new file's path."""
        if file_format not in self.allowed_formats:
            raise ValueError(f"Unsupported file format: {file_format}")

        stamp = utcnow().strftime("%Y%m%d%H%M%S%f")
        filename = f"{sanitize_folder_name(snapshot.get('title'))}_{stamp}.{file_format}"
        path = os.path.join(folder, filename)

        writer = getattr(self, f"_write_{file_format}")
        writer(path, snapshot)
        logger.info("Generated %s document for project %s at %s", file_format, snapshot.get("id"), path)
        return path

    @staticmethod
    def _summary_rows(snapshot: Dict[str, Any]) -> List[Tuple[str, str]]:
        customer = snapshot.get("customer") or {}
        creator = snapshot.get("createdBy") or {}
        return [
            ("Title", _fmt(snapshot.get("title"))),
            ("Description", _fmt(snapshot.get("description"))),
            ("Customer", _fmt(customer.get("name")) or "Personal"),
            ("Customer Email", _fmt(customer.get("email"))),
            ("Created By", _fmt(creator.get("fullname") or creator.get("username"))),
            ("Status", _fmt(snapshot.get("status"))),
            ("Budget", _fmt(snapshot.get("budget"))),
            ("Domain", _fmt(snapshot.get("domainName"))),
            ("Domain Start", _fmt(snapshot.get("domainStartDate"))),
            ("Domain Expiry", _fmt(snapshot.get("domainEndDate"))),
            ("Active", _fmt(snapshot.get("isActive"))),
            ("Renewal Price (paise)", _fmt(snapshot.get("renewalPrice"))),
        ]

    @staticmethod
    def _history_rows(snapshot: Dict[str, Any]) -> List[Tuple[str, str, str, str]]:
        return [
            (
                _fmt(entry.get("renewedAt")),
                _fmt(entry.get("newEndDate")),
                _fmt(entry.get("paymentId")),
                _fmt(entry.get("amount")),
            )
            for entry in snapshot.get("renewalHistory") or []
        ]

    def _write_txt(self, path: str, snapshot: Dict[str, Any]) -> None:
        lines = ["PROJECT SUMMARY", "=" * 40]
        lines += [f"{label}: {value}" for label, value in self._summary_rows(snapshot)]
        history = self._history_rows(snapshot)
        if history:
            lines += ["", "RENEWAL HISTORY", "-" * 40]
            lines += [
                f"{renewed} -> {new_end} | payment {payment} | {amount} paise"
                for renewed, new_end, payment, amount in history
            ]
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    def _write_csv(self, path: str, snapshot: Dict[str, Any]) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Field", "Value"])
            writer.writerows(self._summary_rows(snapshot))
            history = self._history_rows(snapshot)
            if history:
                writer.writerow([])
                writer.writerow(["Renewed At", "New End Date", "Payment ID", "Amount (paise)"])
                writer.writerows(history)

    def _write_pdf(self, path: str, snapshot: Dict[str, Any]) -> None:
        pdf = canvas.Canvas(path, pagesize=A4)
        width, height = A4
        y = height - 2 * cm

        pdf.setFont("Helvetica-Bold", 16)
        pdf.drawString(2 * cm, y, "Project Summary")
        y -= 1.2 * cm

        pdf.setFont("Helvetica", 10)
        for label, value in self._summary_rows(snapshot):
            pdf.drawString(2 * cm, y, f"{label}:")
            pdf.drawString(7 * cm, y, value[:80])
            y -= 0.6 * cm

        history = self._history_rows(snapshot)
        if history:
            y -= 0.6 * cm
            pdf.setFont("Helvetica-Bold", 12)
            pdf.drawString(2 * cm, y, "Renewal History")
            y -= 0.8 * cm
            pdf.setFont("Helvetica", 9)
            for renewed, new_end, payment, amount in history:
                if y < 2 * cm:
                    pdf.showPage()
                    pdf.setFont("Helvetica", 9)
                    y = height - 2 * cm
                pdf.drawString(2 * cm, y, f"{renewed}  ->  {new_end}   {payment}   {amount} paise")
                y -= 0.5 * cm

        pdf.showPage()
        pdf.save()
