"""
Keyspace Output Module
=======================

Console display and JSON report generation for analysis results.
"""

from keyspace.output.console import KeyspaceConsoleOutput
from keyspace.output.report import KeyspaceReportGenerator

__all__ = [
    "KeyspaceConsoleOutput",
    "KeyspaceReportGenerator",
]
