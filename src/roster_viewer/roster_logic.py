"""
Roster Logic for Roster Viewer

Finds today's date cell in a monthly schedule grid and reads which staff
work each shift from the rows beneath it.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
import logging
import re
from typing import Callable, Dict, List, Optional, Tuple, Union

from .settings import AppSettings
from .text_utils import to_halfwidth
from .workbook_reader import (
    Cell, DateCell, DateNotFoundError, Grid, NumberCell, RosterLoadError,
    TextCell, read_first_sheet,
)

logger = logging.getLogger(__name__)

WEEKDAY_CHARS = "月火水木金土日"  # Monday first, as date.weekday()

_DIGITS = re.compile(r"[0-9]+")


class ShiftCategory(Enum):
    EARLY = ("早番", "早")
    DAY = ("日勤", "日")
    LATE = ("遅番", "遅")
    NIGHT = ("夜勤", "夜")

    def __init__(self, label: str, keyword: str):
        self.label = label
        self.keyword = keyword


Position = Tuple[int, int]
Roster = Dict[ShiftCategory, List[str]]


def local_today(utc_offset_hours: int = 9) -> date:
    """Today's date in a fixed UTC offset"""
    return datetime.now(timezone(timedelta(hours=utc_offset_hours))).date()


def format_date_heading(day: date) -> str:
    """e.g. 3月14日(金)"""
    return f"{day.month}月{day.day}日({WEEKDAY_CHARS[day.weekday()]})"


def _parse_uint(text: str) -> Optional[int]:
    text = text.strip()
    if _DIGITS.fullmatch(text):
        return int(text)
    return None


# Cell rules, tried in order. Each returns True when the cell is today.

def _matches_typed_date(cell: Cell, month: int, day: int) -> bool:
    # year is ignored so recurring templates still match
    return isinstance(cell, DateCell) and (cell.value.month, cell.value.day) == (month, day)


def _matches_integer_day(cell: Cell, month: int, day: int) -> bool:
    if isinstance(cell, NumberCell):
        return cell.as_int() == day
    if isinstance(cell, TextCell):
        return _parse_uint(cell.value) == day
    return False


def _matches_normalized_day(cell: Cell, month: int, day: int) -> bool:
    return _parse_uint(to_halfwidth(cell.as_text())) == day


def _matches_slash_date(cell: Cell, month: int, day: int) -> bool:
    parts = to_halfwidth(cell.as_text()).strip().split("/")
    if len(parts) < 2:
        return False
    if len(parts) == 2:
        month_part, day_part = parts
    else:
        month_part, day_part = parts[1], parts[2]
    return _parse_uint(month_part) == month and _parse_uint(day_part) == day


def _contains_date_phrase(cell: Cell, month: int, day: int) -> bool:
    text = to_halfwidth(cell.as_text())
    return f"{month}/{day}" in text or f"{month}月{day}日" in text


CELL_RULES: Tuple[Callable[[Cell, int, int], bool], ...] = (
    _matches_typed_date,
    _matches_integer_day,
    _matches_normalized_day,
    _matches_slash_date,
    _contains_date_phrase,
)


def cell_matches_date(cell: Cell, month: int, day: int) -> bool:
    return any(rule(cell, month, day) for rule in CELL_RULES)


def locate_today_cell(grid: Grid, month: int, day: int) -> Optional[Position]:
    """
    Find the cell that represents (month, day).

    Cells are scanned top to bottom, left to right, and the first match wins:
    the topmost/leftmost candidate is the authoritative date header.

    Returns:
        (row, column) zero-based, or None when nothing in the grid matches
    """
    for row_idx, row in enumerate(grid):
        for col_idx, cell in enumerate(row):
            if cell_matches_date(cell, month, day):
                return row_idx, col_idx
    return None


def classify_shift(marker: str) -> Optional[ShiftCategory]:
    """First category whose keyword appears in the marker text"""
    for category in ShiftCategory:
        if category.keyword in marker:
            return category
    return None


def _find_name(row: List[Cell], shift_col: int) -> str:
    for cell in row[:shift_col]:
        text = cell.as_text().strip()
        if text:
            return text
    return ""


def extract_roster(grid: Grid, date_row: int, shift_col: int) -> Roster:
    """
    Collect staff names per shift from the rows below the date cell.

    Data starts two rows under the date row (a weekday row sits between).
    The shift marker is read from shift_col and the name is the leftmost
    non-empty cell before it. Rows without a marker, without a name, or
    whose marker matches no keyword are skipped.
    """
    roster: Roster = {category: [] for category in ShiftCategory}

    for row in grid[date_row + 2:]:
        if len(row) <= shift_col:
            continue

        marker = row[shift_col].as_text().strip()
        if not marker:
            continue

        name = _find_name(row, shift_col)
        if not name:
            continue

        category = classify_shift(marker)
        if category is not None:
            roster[category].append(name)

    return roster


def format_roster(roster: Roster, separator: str = "、") -> Dict[ShiftCategory, str]:
    """Join names for every category that has at least one"""
    return {
        category: separator.join(names)
        for category, names in roster.items()
        if names
    }


@dataclass
class RosterState:
    """Editable fields of the main window for the current session"""
    staff_names: Dict[ShiftCategory, str] = field(
        default_factory=lambda: {category: "" for category in ShiftCategory}
    )
    schedule_text: str = ""
    status_message: str = ""

    def apply_roster(self, roster: Roster, separator: str = "、"):
        # categories with no names keep whatever the user already had
        self.staff_names.update(format_roster(roster, separator))

    def empty_slot_count(self) -> int:
        return sum(1 for name in self.staff_names.values() if not name.strip())

    def is_complete(self) -> bool:
        return self.empty_slot_count() == 0

    def completeness_message(self) -> str:
        empty_count = self.empty_slot_count()
        if empty_count:
            return f"❌ シフトに不備があります（あと{empty_count}名未配置）"
        return "✅ 今日の配置はOKです！"


@dataclass
class LoadResult:
    """Outcome of one load attempt"""
    success: bool
    status_message: str
    roster: Roster = field(default_factory=dict)
    position: Optional[Position] = None


class RosterLoader:
    """Turns a workbook (or an already-read grid) into today's roster"""

    def __init__(self, settings: Optional[AppSettings] = None,
                 today_provider: Optional[Callable[[], date]] = None):
        self.settings = settings or AppSettings()
        self.today_provider = today_provider or (
            lambda: local_today(self.settings.utc_offset_hours)
        )

    def load_grid(self, grid: Grid, today: Optional[date] = None) -> LoadResult:
        # positions are sheet-absolute (A1 is row 1, column 1), not relative
        # to the first used cell
        today = today or self.today_provider()
        position = locate_today_cell(grid, today.month, today.day)
        if position is None:
            error = DateNotFoundError(today.month, today.day)
            logger.warning(f"Roster not loaded: {error}")
            return LoadResult(success=False, status_message=str(error))

        date_row, shift_col = position
        roster = extract_roster(grid, date_row, shift_col)
        logger.info(
            f"Found {today.month}/{today.day} at row {date_row + 1}, column {shift_col + 1}; "
            + ", ".join(f"{c.label}={len(names)}" for c, names in roster.items())
        )
        return LoadResult(
            success=True,
            status_message=f"✅ エクセルを読み込みました (行:{date_row + 1}, 列:{shift_col + 1})",
            roster=roster,
            position=position,
        )

    def load_file(self, path: Union[str, Path], today: Optional[date] = None) -> LoadResult:
        logger.info(f"Loading roster workbook {path}")
        try:
            grid = read_first_sheet(path)
        except RosterLoadError as e:
            logger.warning(f"Roster not loaded from {path}: {e}")
            return LoadResult(success=False, status_message=str(e))
        return self.load_grid(grid, today)

    def load_into(self, state: RosterState, path: Union[str, Path],
                  today: Optional[date] = None) -> LoadResult:
        """Load a workbook and apply the result to the window state"""
        result = self.load_file(path, today)
        state.status_message = result.status_message
        if result.success:
            state.apply_roster(result.roster, self.settings.name_separator)
        return result
