"""Export of the damage assessment report as an Excel workbook or CSV."""

from __future__ import annotations

from collections.abc import Iterable
import csv
from pathlib import Path
from typing import Any

from loguru import logger
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter

from core.services.report_service import REPORT_COLUMNS

REPORT_SHEET_TITLE = "Damage Assessment Report"
# character widths, one per REPORT_COLUMNS entry
COLUMN_WIDTHS = [15, 30, 15, 12, 12, 12, 12, 40, 12, 12]


def _missing_headers(headers: Iterable[Any]) -> list[str]:
    present = set(headers)
    return [h for h in REPORT_COLUMNS if h not in present]


class XlsxReportExporter:
    """Write report rows to a single-sheet workbook in canonical column order."""

    def export(self, rows: Iterable[dict[str, Any]], xlsx_path: str | Path) -> Path:
        """Write `rows` to `xlsx_path` and return the path written."""
        path = Path(xlsx_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = REPORT_SHEET_TITLE
        sheet.append(REPORT_COLUMNS)
        count = 0
        for row in rows:
            sheet.append([row.get(header, "") for header in REPORT_COLUMNS])
            count += 1
        for index, width in enumerate(COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width
        workbook.save(path)
        logger.info("Report written: {} ({} rows)", path, count)
        return path

    def load(self, xlsx_path: str | Path) -> list[dict[str, Any]]:
        """Read a previously exported workbook back as rows keyed by header."""
        workbook = load_workbook(Path(xlsx_path), read_only=True, data_only=True)
        try:
            if REPORT_SHEET_TITLE not in workbook.sheetnames:
                raise ValueError(f"Workbook has no '{REPORT_SHEET_TITLE}' sheet")
            values = list(workbook[REPORT_SHEET_TITLE].iter_rows(values_only=True))
        finally:
            workbook.close()
        if not values:
            raise ValueError("Report sheet is empty")
        headers = list(values[0])
        missing = _missing_headers(headers)
        if missing:
            raise ValueError(f"Report sheet missing required headers: {missing}")
        return [
            {h: ("" if v is None else v) for h, v in zip(headers, row)} for row in values[1:]
        ]


class CsvReportExporter:
    """Write report rows as CSV in the canonical column order."""

    def export(self, rows: Iterable[dict[str, Any]], csv_path: str | Path) -> Path:
        """Write `rows` to `csv_path` and return the path written."""
        path = Path(csv_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=REPORT_COLUMNS, extrasaction="ignore")
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
                count += 1
        logger.info("Report written: {} ({} rows)", path, count)
        return path

    def load(self, csv_path: str | Path) -> list[dict[str, str]]:
        """Read a previously exported report back as string rows."""
        path = Path(csv_path)
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            missing = _missing_headers(reader.fieldnames or [])
            if missing:
                raise ValueError(f"Report CSV missing required headers: {missing}")
            return list(reader)


def exporter_for(path: str | Path) -> XlsxReportExporter | CsvReportExporter:
    """Pick the writer by file suffix; anything but ``.csv`` gets a workbook."""
    if Path(path).suffix.lower() == ".csv":
        return CsvReportExporter()
    return XlsxReportExporter()
