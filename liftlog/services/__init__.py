"""Service helpers built on top of the record store."""

from .reports import AverageSetsRow, average_sets_report_for, build_average_sets_report

__all__ = [
    "AverageSetsRow",
    "average_sets_report_for",
    "build_average_sets_report",
]
