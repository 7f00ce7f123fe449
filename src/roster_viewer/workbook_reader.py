"""
Workbook Reader for Roster Viewer

Reads the first sheet of a schedule workbook into a grid of tagged cell
values and defines the errors raised while loading a roster.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import List, Union

import pandas as pd

logger = logging.getLogger(__name__)


class RosterLoadError(Exception):
    """Base exception for roster loading. str() is the status shown to the user."""
    pass


class FileOpenError(RosterLoadError):
    """Raised when the file cannot be opened as a workbook"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"❌ ファイルを開けません: {reason}")


class NoSheetError(RosterLoadError):
    """Raised when the workbook contains no sheets"""

    def __init__(self):
        super().__init__("❌ シートが見つかりません")


class SheetReadError(RosterLoadError):
    """Raised when the first sheet cannot be parsed into a grid"""

    def __init__(self, sheet_name: str = ""):
        self.sheet_name = sheet_name
        super().__init__("❌ シートの読み込みに失敗しました")


class DateNotFoundError(RosterLoadError):
    """Raised when no cell in the grid represents today"""

    def __init__(self, month: int, day: int):
        self.month = month
        self.day = day
        super().__init__(f"❌ 本日({month}月{day}日)の日付列が見つかりません")


@dataclass(frozen=True)
class EmptyCell:
    def as_text(self) -> str:
        return ""


@dataclass(frozen=True)
class NumberCell:
    value: Union[int, float]

    def as_text(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)

    def as_int(self):
        """Integral value, or None for fractional numbers"""
        # 14.5 is not truncated to day 14
        if isinstance(self.value, float):
            return int(self.value) if self.value.is_integer() else None
        return int(self.value)


@dataclass(frozen=True)
class DateCell:
    value: date

    def as_text(self) -> str:
        return self.value.isoformat()


@dataclass(frozen=True)
class TextCell:
    value: str

    def as_text(self) -> str:
        return self.value


Cell = Union[EmptyCell, NumberCell, DateCell, TextCell]
Grid = List[List[Cell]]

EMPTY = EmptyCell()


def to_cell(value) -> Cell:
    """Tag a raw value coming out of pandas/openpyxl"""
    if value is None or (isinstance(value, str) and value == ""):
        return EMPTY
    if isinstance(value, str):
        return TextCell(value)
    if isinstance(value, datetime):
        if pd.isna(value):
            return EMPTY
        return DateCell(value.date())
    if isinstance(value, date):
        return DateCell(value)
    if pd.api.types.is_bool(value):
        return TextCell(str(value).upper())
    if pd.api.types.is_number(value):
        if pd.isna(value):
            return EMPTY
        if pd.api.types.is_integer(value):
            return NumberCell(int(value))
        return NumberCell(float(value))
    if pd.isna(value):
        return EMPTY
    # times, durations and anything else are kept as their display text
    return TextCell(str(value))


def grid_from_rows(rows) -> Grid:
    """Build a grid from any iterable of row sequences"""
    return [[to_cell(value) for value in row] for row in rows]


def grid_from_dataframe(frame: pd.DataFrame) -> Grid:
    return grid_from_rows(frame.astype(object).itertuples(index=False, name=None))


def read_first_sheet(path: Union[str, Path]) -> Grid:
    """
    Read the first sheet of a workbook into a grid.

    Raises:
        FileOpenError: the file is missing or is not a readable workbook
        NoSheetError: the workbook has no sheets
        SheetReadError: the first sheet could not be parsed
    """
    try:
        workbook = pd.ExcelFile(path)
    except Exception as e:
        raise FileOpenError(str(e)) from e

    with workbook:
        if not workbook.sheet_names:
            raise NoSheetError()

        sheet_name = workbook.sheet_names[0]
        try:
            frame = workbook.parse(sheet_name, header=None, keep_default_na=False)
        except Exception as e:
            logger.error(f"Error parsing sheet '{sheet_name}' of {path}: {e}")
            raise SheetReadError(sheet_name) from e

    grid = grid_from_dataframe(frame)
    logger.info(f"Read sheet '{sheet_name}' from {path}: {len(grid)} rows")
    return grid
