"""
Spreadsheet Extractor
=====================

Serializes every worksheet of an Excel workbook as pipe-joined rows,
one line per row, skipping fully empty rows.

Uses pandas with the openpyxl engine for xlsx/xlsm and xlrd for
legacy xls workbooks.
"""

import io
from typing import Any

import pandas as pd

from src.ingest.base import FormatExtractor
from src.schemas.document import DocumentFormat
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Legacy .xls files are OLE2 compound documents
_OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

CELL_SEPARATOR = " | "


def _format_cell(value: Any) -> str:
    """Render a cell value; integral floats lose their trailing .0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class SpreadsheetExtractor(FormatExtractor):
    """
    Excel workbook extraction strategy.

    Example:
        Sheet rows ["Bottle A", "HDPE", "250ml"] and [None, None, None]
        produce the single line "Bottle A | HDPE | 250ml".
    """

    label = "Spreadsheet"

    def __init__(
        self,
        max_sheets: int | None = 10,
        max_rows_per_sheet: int | None = 10000,
    ) -> None:
        """
        Initialize spreadsheet extractor.

        Args:
            max_sheets: Maximum worksheets to read (None = all)
            max_rows_per_sheet: Maximum rows read per worksheet (None = all)
        """
        self._max_sheets = max_sheets
        self._max_rows = max_rows_per_sheet

    @property
    def document_format(self) -> DocumentFormat:
        return DocumentFormat.SPREADSHEET

    @staticmethod
    def _engine_for(content: bytes) -> str:
        return "xlrd" if content.startswith(_OLE2_SIGNATURE) else "openpyxl"

    def _extract_text(self, content: bytes) -> str:
        engine = self._engine_for(content)
        sheets: dict[str, pd.DataFrame] = pd.read_excel(
            io.BytesIO(content),
            sheet_name=None,
            header=None,
            dtype=object,
            engine=engine,
            nrows=self._max_rows,
        )

        sheet_names = list(sheets.keys())
        if self._max_sheets is not None and len(sheet_names) > self._max_sheets:
            logger.warning(
                "Workbook has more sheets than allowed, truncating",
                sheets=len(sheet_names),
                max_sheets=self._max_sheets,
            )
            sheet_names = sheet_names[: self._max_sheets]

        lines: list[str] = []
        for sheet_name in sheet_names:
            df = sheets[sheet_name]
            for row in df.itertuples(index=False, name=None):
                cells = [_format_cell(v) for v in row if pd.notna(v)]
                cells = [c for c in cells if c]
                if cells:
                    lines.append(CELL_SEPARATOR.join(cells))

        logger.debug(
            "Workbook serialized",
            engine=engine,
            sheets=len(sheet_names),
            rows=len(lines),
        )
        return "\n".join(lines)
