"""
User Interface for Roster Viewer

CustomTkinter-based main window: today's date, four editable shift slots,
a bordered roster table, completeness and load status, and today's plan.
"""

import customtkinter as ctk
from tkinter import messagebox, filedialog
from datetime import date
from typing import Dict, Optional
import logging

from .roster_logic import RosterLoader, RosterState, ShiftCategory, format_date_heading
from .reporting import FrameCapture, ScreenshotRequest, export_roster_pdf, grab_frame, save_screenshot
from .settings import AppSettings

logger = logging.getLogger(__name__)


# Configure CustomTkinter
ctk.set_appearance_mode("light")
ctk.set_default_color_theme("blue")


class RosterTable(ctk.CTkFrame):
    """Read-only table: shift labels on top, staff names below"""

    def __init__(self, parent, font_family: str):
        super().__init__(parent, border_width=2, border_color="black", corner_radius=0)
        self.name_labels: Dict[ShiftCategory, ctk.CTkLabel] = {}

        for col, category in enumerate(ShiftCategory):
            ctk.CTkLabel(
                self,
                text=category.label,
                font=ctk.CTkFont(family=font_family, size=18, weight="bold"),
                width=70
            ).grid(row=0, column=col, padx=8, pady=8)

            name_label = ctk.CTkLabel(
                self,
                text="―",
                font=ctk.CTkFont(family=font_family, size=18),
                width=70
            )
            name_label.grid(row=1, column=col, padx=8, pady=8)
            self.name_labels[category] = name_label

    def update_names(self, staff_names: Dict[ShiftCategory, str]):
        for category, label in self.name_labels.items():
            label.configure(text=staff_names[category] or "―")


class MainWindow(ctk.CTk):
    """Main application window"""

    def __init__(self, settings: Optional[AppSettings] = None,
                 loader: Optional[RosterLoader] = None,
                 roster_state: Optional[RosterState] = None):
        super().__init__()

        self.settings = settings or AppSettings()
        self.loader = loader or RosterLoader(self.settings)
        self.roster_state = roster_state or RosterState()
        self.today: date = self.loader.today_provider()
        self._pending_screenshot: Optional[ScreenshotRequest] = None

        self.title(self.settings.window_title)
        self.geometry(self.settings.geometry)
        self.minsize(*self.settings.min_window_size)

        self._create_widgets()
        self._refresh()

    def _font(self, size: int, weight: str = "normal", slant: str = "roman") -> ctk.CTkFont:
        return ctk.CTkFont(family=self.settings.font_family, size=size, weight=weight, slant=slant)

    def _create_widgets(self):
        main_frame = ctk.CTkFrame(self, fg_color="transparent")
        main_frame.pack(fill="both", expand=True, padx=10, pady=10)

        # Top bar: date + buttons
        top_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        top_frame.pack(fill="x", pady=(0, 15))

        ctk.CTkLabel(
            top_frame,
            text=f"📅 {format_date_heading(self.today)}",
            font=self._font(22, "bold")
        ).pack(side="left")

        ctk.CTkButton(
            top_frame,
            text="スクショ\n印刷",
            command=self._request_screenshot,
            width=80,
            font=self._font(14)
        ).pack(side="right", padx=(5, 0))

        ctk.CTkButton(
            top_frame,
            text="PDF\n出力",
            command=self._export_pdf,
            width=80,
            font=self._font(14)
        ).pack(side="right", padx=5)

        ctk.CTkButton(
            top_frame,
            text="エクセル\n読込み",
            command=self._load_workbook,
            width=80,
            font=self._font(14)
        ).pack(side="right", padx=5)

        # Shift entries (left) + roster table (right)
        shift_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        shift_frame.pack(fill="x")

        entry_frame = ctk.CTkFrame(shift_frame, fg_color="transparent")
        entry_frame.pack(side="left", padx=(0, 20))

        self.name_vars: Dict[ShiftCategory, ctk.StringVar] = {}
        for row, category in enumerate(ShiftCategory):
            ctk.CTkLabel(
                entry_frame,
                text=f"{category.label}:",
                font=self._font(16, "bold")
            ).grid(row=row, column=0, sticky="w", pady=2)

            name_var = ctk.StringVar(value=self.roster_state.staff_names[category])
            name_var.trace_add("write", lambda *_args, c=category: self._on_name_edited(c))
            ctk.CTkEntry(
                entry_frame,
                textvariable=name_var,
                width=120,
                font=self._font(14)
            ).grid(row=row, column=1, padx=(5, 0), pady=2)
            self.name_vars[category] = name_var

        self.roster_table = RosterTable(shift_frame, self.settings.font_family)
        self.roster_table.pack(side="left")

        # Status messages
        self.completeness_label = ctk.CTkLabel(main_frame, text="", font=self._font(14, "bold"))
        self.completeness_label.pack(anchor="w", pady=(10, 0))

        self.status_label = ctk.CTkLabel(main_frame, text="", font=self._font(12, slant="italic"))
        self.status_label.pack(anchor="w")

        # Today's plan
        plan_frame = ctk.CTkFrame(main_frame, border_width=2, border_color="black", corner_radius=5)
        plan_frame.pack(fill="both", expand=True, pady=(10, 0))

        ctk.CTkLabel(
            plan_frame,
            text="★本日の予定",
            font=self._font(22, "bold")
        ).pack(anchor="w", padx=15, pady=(15, 10))

        self.schedule_textbox = ctk.CTkTextbox(plan_frame, font=self._font(18), border_width=0)
        self.schedule_textbox.pack(fill="both", expand=True, padx=15, pady=(0, 15))
        self.schedule_textbox.insert("1.0", self.roster_state.schedule_text)
        self.schedule_textbox.bind("<KeyRelease>", self._on_schedule_edited)

    def _refresh(self):
        """Redraw everything derived from the state"""
        self.roster_table.update_names(self.roster_state.staff_names)
        self.completeness_label.configure(
            text=self.roster_state.completeness_message(),
            text_color="green" if self.roster_state.is_complete() else "red"
        )
        self.status_label.configure(text=self.roster_state.status_message)

    def _on_name_edited(self, category: ShiftCategory):
        self.roster_state.staff_names[category] = self.name_vars[category].get()
        self._refresh()

    def _on_schedule_edited(self, _event=None):
        self.roster_state.schedule_text = self.schedule_textbox.get("1.0", "end-1c")

    def _load_workbook(self):
        """Pick a workbook and fill today's shifts from it"""
        path = filedialog.askopenfilename(
            title="勤務表を開く",
            filetypes=self.settings.workbook_filetypes
        )
        if not path:
            return  # User cancelled

        self.loader.load_into(self.roster_state, path, self.today)

        for category, name_var in self.name_vars.items():
            if name_var.get() != self.roster_state.staff_names[category]:
                name_var.set(self.roster_state.staff_names[category])
        self._refresh()

    def _request_screenshot(self):
        if self._pending_screenshot is not None and not self._pending_screenshot.fulfilled:
            return
        self._pending_screenshot = ScreenshotRequest(self._on_screenshot)
        # capture once the pressed button has been redrawn
        self.after(self.settings.screenshot_delay_ms, self._capture_frame, self._pending_screenshot)

    def _capture_frame(self, request: ScreenshotRequest):
        self.update_idletasks()
        left, top = self.winfo_rootx(), self.winfo_rooty()
        bbox = (left, top, left + self.winfo_width(), top + self.winfo_height())
        try:
            capture = grab_frame(bbox)
        except Exception as e:
            logger.error(f"Error capturing window: {e}", exc_info=True)
            request.cancel()
            return
        request.fulfil(capture)

    def _on_screenshot(self, capture: FrameCapture):
        output_path = filedialog.asksaveasfilename(
            initialfile=f"roster_{self.today.strftime('%Y%m%d')}",
            defaultextension=".png",
            filetypes=[("PNG files", "*.png")],
            title="スクリーンショットを保存"
        )
        if not output_path:
            return  # User cancelled

        save_screenshot(capture, output_path)

    def _export_pdf(self):
        output_path = filedialog.asksaveasfilename(
            initialfile=f"roster_{self.today.strftime('%Y%m%d')}",
            defaultextension=".pdf",
            filetypes=[("PDF files", "*.pdf")],
            title="PDFに出力"
        )
        if not output_path:
            return  # User cancelled

        self._on_schedule_edited()
        if export_roster_pdf(self.roster_state, self.today, output_path):
            messagebox.showinfo("PDF出力", f"PDFを保存しました:\n{output_path}")
        else:
            messagebox.showerror("PDF出力", "PDFの保存に失敗しました。")
