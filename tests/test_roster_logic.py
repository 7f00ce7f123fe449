"""
Test Suite for Roster Logic

Covers locating today's date cell, extracting staff per shift, and the
window state that receives the result.
"""

import pytest
from datetime import date
import sys
from pathlib import Path

# Setup import path for src
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roster_viewer.roster_logic import (
    RosterLoader, RosterState, ShiftCategory, classify_shift, extract_roster,
    format_date_heading, format_roster, local_today, locate_today_cell,
)
from roster_viewer.settings import AppSettings
from roster_viewer.workbook_reader import DateCell, NumberCell, TextCell, grid_from_rows


@pytest.fixture
def monthly_grid():
    """Date found at (2, 3): title, header, date row, weekday row, staff rows."""
    return grid_from_rows([
        ["勤務表", None, None, None],
        ["氏名", None, None, None],
        [None, None, None, "3/14"],
        ["Kato", None, None, "夜勤"],  # weekday row position, never read
        ["Tanaka", "", "", "早番"],
        ["", "", "", "日勤"],
        ["", "Suzuki", "Ito", "遅番"],
        ["Yoshida", None, None, "早"],
        ["Mori", None, None, "休"],
        ["Short", None],
        ["Abe", None, None, None],
        ["Ogawa", None, None, "夜"],
    ])


@pytest.fixture
def loader():
    return RosterLoader(today_provider=lambda: date(2025, 3, 14))


# Locator

def test_locate_first_match_row_major():
    grid = grid_from_rows([
        ["a", "b", "c", "d"],
        ["e", "f", "g", "h"],
        ["i", "j", "k", "3/14"],
        ["l", "m", "n", "o"],
        ["p", "q", "r", "s"],
        ["t", "3/14", "u", "v"],
    ])
    assert locate_today_cell(grid, 3, 14) == (2, 3)


def test_locate_leftmost_in_row():
    grid = grid_from_rows([["x", 14, "3/14"]])
    assert locate_today_cell(grid, 3, 14) == (0, 1)


def test_locate_integer_day_any_month():
    """
    Why this is important: month-specific sheets usually only carry day
    numbers in the header, so a bare 14 must match the 14th of any month.
    """
    grid = grid_from_rows([["3/15 予定"], ["Sato", 14]])
    assert locate_today_cell(grid, 3, 14) == (1, 1)
    assert locate_today_cell(grid, 11, 14) == (1, 1)


def test_locate_integral_float_but_not_fraction():
    assert locate_today_cell([[NumberCell(14.0)]], 3, 14) == (0, 0)
    assert locate_today_cell([[NumberCell(14.5)]], 3, 14) is None


def test_locate_typed_date_ignores_year():
    grid = [[TextCell("氏名"), DateCell(date(2020, 3, 13)), DateCell(date(2020, 3, 14))]]
    assert locate_today_cell(grid, 3, 14) == (0, 2)
    assert locate_today_cell(grid, 4, 14) is None


@pytest.mark.parametrize("text", ["3/14", "2024/3/14", " 3 / 14 ", "３/１４", "２０２４/３/１４"])
def test_locate_slash_dates(text):
    assert locate_today_cell(grid_from_rows([["氏名", text]]), 3, 14) == (0, 1)


def test_locate_slash_date_wrong_month():
    assert locate_today_cell(grid_from_rows([["2024/4/14"]]), 3, 14) is None


def test_locate_fullwidth_day_number():
    assert locate_today_cell(grid_from_rows([["名前", "　１４　"]]), 3, 14) == (0, 1)


def test_locate_long_form_phrase():
    grid = grid_from_rows([["予定表"], ["３月１４日(金)"]])
    assert locate_today_cell(grid, 3, 14) == (1, 0)


def test_locate_embedded_slash_date():
    grid = grid_from_rows([["Name", "", "", "Date"], ["Tanaka", "", "", "3/14 早番"]])
    assert locate_today_cell(grid, 3, 14) == (1, 3)


def test_locate_no_match():
    grid = grid_from_rows([["14日"], ["3/15"], ["abc"], [None]])
    assert locate_today_cell(grid, 3, 14) is None
    assert locate_today_cell([], 3, 14) is None


# Extractor

def test_classify_shift_fixed_order():
    assert classify_shift("早番") is ShiftCategory.EARLY
    assert classify_shift("日勤") is ShiftCategory.DAY
    assert classify_shift("遅番") is ShiftCategory.LATE
    assert classify_shift("夜勤") is ShiftCategory.NIGHT
    # first keyword in category order wins, not first in the text
    assert classify_shift("日早") is ShiftCategory.EARLY
    assert classify_shift("休") is None


def test_extract_roster_attribution(monthly_grid):
    roster = extract_roster(monthly_grid, 2, 3)

    assert roster[ShiftCategory.EARLY] == ["Tanaka", "Yoshida"]
    assert roster[ShiftCategory.DAY] == []  # row 5 has no name
    assert roster[ShiftCategory.LATE] == ["Suzuki"]
    assert roster[ShiftCategory.NIGHT] == ["Ogawa"]


def test_extract_roster_skips_weekday_row(monthly_grid):
    roster = extract_roster(monthly_grid, 2, 3)
    assert "Kato" not in roster[ShiftCategory.NIGHT]


def test_extract_roster_one_category_per_row():
    grid = grid_from_rows([
        [None, "3/14"],
        [None, "金"],
        ["Tanaka", "早日遅夜"],
    ])
    roster = extract_roster(grid, 0, 1)
    assert roster[ShiftCategory.EARLY] == ["Tanaka"]
    assert sum(len(names) for names in roster.values()) == 1


def test_format_roster_only_non_empty():
    roster = {
        ShiftCategory.EARLY: ["田中", "鈴木"],
        ShiftCategory.DAY: [],
        ShiftCategory.LATE: ["佐藤"],
        ShiftCategory.NIGHT: [],
    }
    assert format_roster(roster) == {
        ShiftCategory.EARLY: "田中、鈴木",
        ShiftCategory.LATE: "佐藤",
    }


# State and loader

def test_apply_roster_keeps_unmatched_slots():
    """
    Why this is important: a partial load must never erase names the user
    typed by hand for shifts the workbook did not mention.
    """
    state = RosterState()
    state.staff_names[ShiftCategory.DAY] = "Yamada"

    state.apply_roster({ShiftCategory.EARLY: ["Tanaka"], ShiftCategory.DAY: []})

    assert state.staff_names[ShiftCategory.EARLY] == "Tanaka"
    assert state.staff_names[ShiftCategory.DAY] == "Yamada"
    assert state.staff_names[ShiftCategory.LATE] == ""


def test_completeness_message():
    state = RosterState()
    assert state.empty_slot_count() == 4
    assert state.completeness_message() == "❌ シフトに不備があります（あと4名未配置）"

    for category in ShiftCategory:
        state.staff_names[category] = "X"
    state.staff_names[ShiftCategory.NIGHT] = "   "
    assert state.empty_slot_count() == 1

    state.staff_names[ShiftCategory.NIGHT] = "Y"
    assert state.is_complete()
    assert state.completeness_message() == "✅ 今日の配置はOKです！"


def test_load_grid_success(loader, monthly_grid):
    result = loader.load_grid(monthly_grid)

    assert result.success
    assert result.position == (2, 3)
    assert result.status_message == "✅ エクセルを読み込みました (行:3, 列:4)"


def test_load_grid_date_not_found(loader):
    result = loader.load_grid(grid_from_rows([["氏名", "3/15"]]))

    assert not result.success
    assert result.status_message == "❌ 本日(3月14日)の日付列が見つかりません"
    assert result.roster == {}


def test_load_grid_empty(loader):
    result = loader.load_grid([])
    assert not result.success
    assert "3月14日" in result.status_message


def test_format_date_heading():
    assert format_date_heading(date(2025, 3, 14)) == "3月14日(金)"
    assert format_date_heading(date(2026, 10, 19)) == "10月19日(月)"


def test_loader_uses_settings_offset():
    settings = AppSettings(utc_offset_hours=-12)
    loader = RosterLoader(settings)
    assert loader.today_provider() == local_today(-12)
    assert AppSettings().geometry == "750x700"
