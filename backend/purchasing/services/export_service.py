"""
Export of purchase suggestions to CSV and Excel.
"""
import csv
import io
import logging

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "xlsx")

CONTENT_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

COLUMNS = [
    ("Insumo", "insumo_name"),
    ("Purchase unit", "purchase_unit"),
    ("Current stock", "current_stock"),
    ("Minimum stock", "min_stock_level"),
    ("Needed (raw)", "total_needed_purchase_unit_raw"),
    ("Needed", "total_needed_purchase_unit"),
    ("Suggested purchase", "purchase_suggestion_rounded"),
    ("Reason", "reason_for_purchase_suggestion"),
    ("Unit cost", "unit_cost"),
    ("Estimated cost", "estimated_purchase_cost"),
]


class SuggestionExportService:
    """Renders a PlanningResult as a downloadable file."""

    @staticmethod
    def _rows(result):
        for suggestion in result.suggestions:
            row = []
            for _, attr in COLUMNS:
                value = getattr(suggestion, attr)
                if attr == "total_needed_purchase_unit_raw":
                    value = round(value, 4)
                row.append(value if value is not None else "")
            yield row

    @staticmethod
    def export_to_csv(result) -> bytes:
        output = io.StringIO()
        writer = csv.writer(output)
        try:
            writer.writerow(["Purchase suggestions"])
            writer.writerow([f"Date Range: {result.start_date} to {result.end_date}"])
            writer.writerow([f"Generated: {timezone.now():%Y-%m-%d %H:%M}"])
            writer.writerow([])
            writer.writerow([header for header, _ in COLUMNS])
            for row in SuggestionExportService._rows(result):
                writer.writerow(row)
            writer.writerow([])
            writer.writerow(["Total estimated cost", result.total_estimated_cost])
            return output.getvalue().encode("utf-8")
        except Exception as e:
            logger.error(f"CSV export of purchase suggestions failed: {e}")
            raise
        finally:
            output.close()

    @staticmethod
    def export_to_xlsx(result) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "Purchase suggestions"

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        try:
            ws["A1"] = "Purchase suggestions"
            ws["A1"].font = Font(bold=True, size=14)
            ws["A2"] = f"Date Range: {result.start_date} to {result.end_date}"

            header_row = 4
            for col, (header, _) in enumerate(COLUMNS, start=1):
                cell = ws.cell(row=header_row, column=col, value=header)
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = header_alignment

            row_number = header_row
            for row_number, row in enumerate(SuggestionExportService._rows(result), start=header_row + 1):
                for col, value in enumerate(row, start=1):
                    ws.cell(row=row_number, column=col, value=value)

            total_row = row_number + 2
            ws.cell(row=total_row, column=len(COLUMNS) - 1, value="Total").font = Font(bold=True)
            ws.cell(row=total_row, column=len(COLUMNS), value=result.total_estimated_cost).font = Font(bold=True)

            for column in ws.iter_cols(min_row=header_row):
                width = max(len(str(cell.value)) for cell in column if cell.value is not None)
                ws.column_dimensions[get_column_letter(column[0].column)].width = min(width + 2, 50)

            output = io.BytesIO()
            wb.save(output)
            return output.getvalue()
        except Exception as e:
            logger.error(f"Excel export of purchase suggestions failed: {e}")
            raise

    @staticmethod
    def export(result, fmt: str):
        """
        Returns:
            (content bytes, content type, filename)
        """
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format '{fmt}'")
        content = (
            SuggestionExportService.export_to_csv(result)
            if fmt == "csv"
            else SuggestionExportService.export_to_xlsx(result)
        )
        filename = f"purchase_suggestions_{result.start_date}_{result.end_date}.{fmt}"
        return content, CONTENT_TYPES[fmt], filename
