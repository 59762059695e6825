"""
Report persistence and console summaries.
"""

from .generator import JsonReportSink, ReportSink, print_summary

__all__ = ["JsonReportSink", "ReportSink", "print_summary"]
