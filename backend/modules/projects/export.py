"""
CSV rendering of the admin project export.
"""

import csv
import io
from datetime import date
from typing import Optional

from .models import ProjectExportRow

CSV_COLUMNS = [
    ("Project Name", "name"),
    ("Description", "description"),
    ("Short Name", "short_name"),
    ("Target URL", "target_url"),
    ("Status", "status"),
    ("Owners", "owners"),
    ("Created At", "created_at"),
    ("Updated At", "updated_at"),
    ("Approver", "approver"),
    ("Approved At", "approved_at"),
    ("Click Count", "click_count"),
]


def render_csv(rows: list[ProjectExportRow]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([header for header, _ in CSV_COLUMNS])
    for row in rows:
        writer.writerow([getattr(row, field) for _, field in CSV_COLUMNS])
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"aka-projects-{today.isoformat()}.csv"
