"""
Reporting and Export Module for Roster Viewer

Handles screenshot capture/encoding of the main window and PDF printing of
the day's roster.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Tuple
from xml.sax.saxutils import escape
import logging

from PIL import Image, ImageGrab
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from .roster_logic import RosterState, ShiftCategory, format_date_heading

logger = logging.getLogger(__name__)

JAPANESE_FONT = "HeiseiKakuGo-W5"
EMPTY_SLOT = "―"


@dataclass
class FrameCapture:
    """RGBA8 pixels of one rendered frame"""
    width: int
    height: int
    pixels: bytes

    @classmethod
    def from_image(cls, image: Image.Image) -> 'FrameCapture':
        rgba = image.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())


class ScreenshotRequest:
    """
    One-shot request for a capture of the current frame.

    The window decides when the frame is ready and calls fulfil(); the
    callback runs at most once and later captures are ignored.
    """

    def __init__(self, on_capture: Callable[[FrameCapture], None]):
        self.on_capture = on_capture
        self.fulfilled = False

    def fulfil(self, capture: FrameCapture) -> bool:
        if self.fulfilled:
            logger.debug("Screenshot request already fulfilled, dropping capture")
            return False
        self.fulfilled = True
        self.on_capture(capture)
        return True

    def cancel(self):
        """Give up on this request; a late capture is dropped"""
        self.fulfilled = True


def grab_frame(bbox: Tuple[int, int, int, int]) -> FrameCapture:
    """Capture a screen region (left, top, right, bottom)"""
    return FrameCapture.from_image(ImageGrab.grab(bbox=bbox))


def save_screenshot(capture: FrameCapture, output_path: str) -> bool:
    """Encode a capture to an image file; format follows the extension"""
    try:
        image = Image.frombytes("RGBA", (capture.width, capture.height), capture.pixels)
        image.save(output_path)
        logger.info(f"Saved screenshot {capture.width}x{capture.height} to {output_path}")
        return True
    except Exception as e:
        logger.error(f"Error saving screenshot: {e}", exc_info=True)
        return False


class RosterReport:
    """Printable one-page PDF of the day's roster"""

    def __init__(self):
        pdfmetrics.registerFont(UnicodeCIDFont(JAPANESE_FONT))
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='RosterTitle',
            parent=self.styles['Heading1'],
            fontName=JAPANESE_FONT,
            fontSize=20,
            spaceAfter=20,
        ))

        self.styles.add(ParagraphStyle(
            name='RosterHeading',
            parent=self.styles['Heading2'],
            fontName=JAPANESE_FONT,
            fontSize=16,
            spaceAfter=10,
        ))

        self.styles.add(ParagraphStyle(
            name='RosterBody',
            parent=self.styles['Normal'],
            fontName=JAPANESE_FONT,
            fontSize=12,
            leading=18,
        ))

    def export_pdf(self, state: RosterState, today: date, output_path: str) -> bool:
        """Write the roster table and today's plan to a PDF"""
        try:
            doc = SimpleDocTemplate(
                output_path,
                pagesize=A4,
                rightMargin=0.75*inch,
                leftMargin=0.75*inch,
                topMargin=0.75*inch,
                bottomMargin=0.75*inch
            )

            story = [
                Paragraph(escape(format_date_heading(today)), self.styles['RosterTitle']),
                self._create_shift_table(state),
                Spacer(1, 12),
                Paragraph(self._format_status(state), self.styles['RosterBody']),
                Spacer(1, 20),
                Paragraph("★本日の予定", self.styles['RosterHeading']),
                Paragraph(self._format_note(state.schedule_text), self.styles['RosterBody']),
            ]

            doc.build(story)
            logger.info(f"Exported roster PDF to {output_path}")
            return True

        except Exception as e:
            logger.error(f"Error creating PDF: {e}", exc_info=True)
            return False

    def _create_shift_table(self, state: RosterState) -> Table:
        header = [category.label for category in ShiftCategory]
        names = [state.staff_names[category] or EMPTY_SLOT for category in ShiftCategory]

        table = Table([header, names], colWidths=[1.6*inch]*len(header))
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, -1), JAPANESE_FONT),
            ('FONTSIZE', (0, 0), (-1, -1), 14),
            ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('BOX', (0, 0), (-1, -1), 2, colors.black),
            ('INNERGRID', (0, 0), (-1, -1), 1, colors.black),
        ]))
        return table

    @staticmethod
    def _format_status(state: RosterState) -> str:
        empty_count = state.empty_slot_count()
        if empty_count:
            return f"未配置: あと{empty_count}名"
        return "全シフト配置済み"

    @staticmethod
    def _format_note(text: str) -> str:
        if not text.strip():
            return EMPTY_SLOT
        return escape(text).replace("\n", "<br/>")


def export_roster_pdf(state: RosterState, today: date, output_path: str) -> bool:
    return RosterReport().export_pdf(state, today, output_path)
