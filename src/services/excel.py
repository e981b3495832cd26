# reads a product list out of the first sheet of an uploaded .xlsx workbook
from __future__ import annotations

import asyncio
import io
import math
from datetime import date, datetime
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from services.errors import (
    ColumnsNotFoundError,
    EmptySheetError,
    RowValidationError,
    WorkbookReadError,
)
from services.models import Product
from utils.logger import get_logger

_logger = get_logger(__name__)

# value types openpyxl hands back with values_only=True
Cell = Union[str, int, float, bool, datetime, date, None]
Row = List[Cell]

COLUMN_SYNONYMS = {
    "code": ["code", "product code"],
    "name": ["name", "product name"],
    "price": ["price", "product price"],
}


class ColumnIndices(NamedTuple):
    code: Optional[int]
    name: Optional[int]
    price: Optional[int]

    def missing(self) -> List[str]:
        return [field.capitalize() for field, idx in self._asdict().items() if idx is None]


# ---------------------------
# Cell coercion
# ---------------------------


def _is_blank(cell: Cell) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def cell_to_text(cell: Cell) -> str:
    """Stringify a cell the way it reads in the spreadsheet, trimmed."""
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def to_number(cell: Cell) -> float:
    """
    Coerce a price cell to a non-negative float.

    Text that does not parse as a number yields 0.0 instead of failing,
    as do NaN/inf and negative values.
    """
    if cell is None:
        return 0.0
    if isinstance(cell, bool):
        value = float(cell)
    elif isinstance(cell, (int, float)):
        value = float(cell)
    elif isinstance(cell, str):
        text = cell.strip()
        if not text:
            return 0.0
        try:
            # float() also takes digit separators such as "1_000"
            if "_" in text:
                raise ValueError(f"digit separator in {text!r}")
            value = float(text)
        except ValueError:
            _logger.warning(f"Price {cell!r} is not a number, using 0.")
            return 0.0
    else:
        _logger.warning(f"Price {cell!r} is not a number, using 0.")
        return 0.0

    if not math.isfinite(value) or value < 0:
        _logger.warning(f"Price {cell!r} is out of range, using 0.")
        return 0.0
    return value


# ---------------------------
# Column resolver & row validator
# ---------------------------


def resolve_columns(header_row: Sequence[Cell]) -> ColumnIndices:
    """
    Map the header row to the position of the code, name and price columns.

    Headers are matched case-insensitively by substring against COLUMN_SYNONYMS,
    synonyms tried in order; the first matching header cell wins.
    """
    headers = [cell_to_text(cell).lower() for cell in header_row]

    def find(synonyms: List[str]) -> Optional[int]:
        for synonym in synonyms:
            for idx, header in enumerate(headers):
                if synonym in header:
                    return idx
        return None

    return ColumnIndices(
        code=find(COLUMN_SYNONYMS["code"]),
        name=find(COLUMN_SYNONYMS["name"]),
        price=find(COLUMN_SYNONYMS["price"]),
    )


def validate_row(
    row: Sequence[Cell], indices: ColumnIndices, row_number: int
) -> Optional[Product]:
    """
    Turn one data row into a Product.
    Returns None for a row without cells, raises RowValidationError
    naming the 1-based row number when a required cell is missing.
    """
    if len(row) == 0:
        return None

    def cell_at(idx: int) -> Cell:
        return row[idx] if idx < len(row) else None

    code_cell = cell_at(indices.code)
    if _is_blank(code_cell):
        raise RowValidationError(row_number, "Code")
    name_cell = cell_at(indices.name)
    if _is_blank(name_cell):
        raise RowValidationError(row_number, "Name")
    price_cell = cell_at(indices.price)
    if price_cell is None:
        raise RowValidationError(row_number, "Price")

    return Product(
        code=cell_to_text(code_cell),
        name=cell_to_text(name_cell),
        price=to_number(price_cell),
    )


# ---------------------------
# Sheet importer
# ---------------------------


def _trim_row(values: Sequence[Cell]) -> Row:
    row = list(values)
    if all(_is_blank(cell) for cell in row):
        return []
    # only absent cells are cut, a blank string is still a present cell
    while row and row[-1] is None:
        row.pop()
    return row


def read_sheet_rows(file_bytes: bytes) -> List[Tuple[int, Row]]:
    """
    Load the first worksheet and return (row_number, cells) pairs.

    Trailing absent cells are cut, and a row of only blank cells has no
    cells. Blank rows before the header and after the last data row are dropped.
    """
    try:
        wb = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        _logger.error(f"Failed to load workbook: {e}")
        raise WorkbookReadError("File could not be read as an Excel workbook.") from e

    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]
        rows = [
            (row_number, _trim_row(values))
            for row_number, values in enumerate(ws.iter_rows(values_only=True), 1)
        ]
    finally:
        wb.close()

    while rows and not rows[0][1]:
        rows.pop(0)
    while rows and not rows[-1][1]:
        rows.pop()
    return rows


def parse_products(file_bytes: bytes) -> List[Product]:
    rows = read_sheet_rows(file_bytes)
    if len(rows) < 2:
        raise EmptySheetError()

    header_number, header = rows[0]
    indices = resolve_columns(header)
    missing = indices.missing()
    if missing:
        _logger.error(f"Header row {header_number} lacks columns: {missing}")
        raise ColumnsNotFoundError(missing)
    _logger.debug(f"Resolved columns {indices} from header row {header_number}")

    products: List[Product] = []
    for row_number, row in rows[1:]:
        product = validate_row(row, indices, row_number)
        if product is not None:
            products.append(product)
    return products


async def import_products(file_bytes: bytes) -> List[Product]:
    """
    Parse the uploaded workbook into a product list, in spreadsheet row order.
    Any failure aborts the whole import with a SheetImportError.
    """
    products = await asyncio.to_thread(parse_products, file_bytes)
    _logger.info(f"Imported {len(products)} products.")
    return products
