"""
Application Settings for Roster Viewer

Holds the fixed defaults used by the window and the roster loader. Nothing is
read from disk or the environment.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class AppSettings:
    """Window, locale and logging defaults"""
    window_title: str = "勤務表ビューア"
    window_size: Tuple[int, int] = (750, 700)
    min_window_size: Tuple[int, int] = (600, 500)
    font_family: str = "Noto Sans JP"
    utc_offset_hours: int = 9  # JST
    name_separator: str = "、"
    log_dir: str = "logs"
    screenshot_delay_ms: int = 150
    workbook_filetypes: List[Tuple[str, str]] = field(default_factory=lambda: [
        ("Excel files", "*.xlsx *.xlsm *.xls"),
        ("All files", "*.*"),
    ])

    @property
    def geometry(self) -> str:
        width, height = self.window_size
        return f"{width}x{height}"
