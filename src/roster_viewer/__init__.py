"""
Daily Shift Roster Viewer

A desktop application that opens a monthly shift schedule workbook, finds
today's column and shows who works the early, day, late and night shifts.
"""

__version__ = "1.0.0"
__author__ = "Roster Viewer Team"
