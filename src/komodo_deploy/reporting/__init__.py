"""
komodo-deploy Reporting

Result normalization, step outputs and job summary generation.
"""

from .updates import build_status_map, flatten_results, is_valid_record
from .summary import render_summary, report, write_step_summary

__all__ = [
    "build_status_map",
    "flatten_results",
    "is_valid_record",
    "render_summary",
    "report",
    "write_step_summary",
]
