from __future__ import annotations

import csv
import io
import json
from typing import Any, Iterable, List, Mapping

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .errors import BadRequest

EXPORT_FORMATS = ("csv", "excel")
CSV_CONTENT_TYPE = "text/csv"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ---------- Normalización de celdas ----------

def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _xlsx_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


# ---------- Conversores ----------

def rows_to_csv(rows: Iterable[Mapping[str, Any]], headers: List[str]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_value(row.get(h)) for h in headers])
    return buf.getvalue()


def rows_to_xlsx(rows: Iterable[Mapping[str, Any]], headers: List[str]) -> bytes:
    """
    Una sola hoja ("Sheet1"). Ancho de columna = min(max(largo, 10), 50),
    donde largo es el texto más largo de la columna (cabecera incluida).
    """
    rows = list(rows)
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    ws.append(headers)

    widths = [len(h) for h in headers]
    for row in rows:
        values = [_xlsx_value(row.get(h)) for h in headers]
        ws.append(values)
        for i, v in enumerate(values):
            widths[i] = max(widths[i], len(str(v)))

    for i, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = min(max(width, 10), 50)

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def export_response(rows: Iterable[Mapping[str, Any]], headers: List[str], fmt: str, filename: str) -> HttpResponse:
    if fmt not in EXPORT_FORMATS:
        raise BadRequest("Invalid format. Use 'csv' or 'excel'")
    if fmt == "csv":
        resp = HttpResponse(rows_to_csv(rows, headers), content_type=CSV_CONTENT_TYPE)
        resp["Content-Disposition"] = f'attachment; filename="{filename}.csv"'
        return resp
    resp = HttpResponse(rows_to_xlsx(rows, headers), content_type=XLSX_CONTENT_TYPE)
    resp["Content-Disposition"] = f'attachment; filename="{filename}.xlsx"'
    return resp


def iso(value: Any) -> str:
    """Fechas/datetimes a ISO 8601; None -> ''."""
    if value is None:
        return ""
    return value.isoformat()
