"""Text-file input and output for the simulator."""

from dvsim.io.output import format_report, format_reports, format_round, format_tables, write_output
from dvsim.io.parsers import read_changes, read_messages, read_topology
from dvsim.io.wire import DEFAULT_WIRE, WireFormat

__all__ = [
    "DEFAULT_WIRE",
    "WireFormat",
    "format_report",
    "format_reports",
    "format_round",
    "format_tables",
    "read_changes",
    "read_messages",
    "read_topology",
    "write_output",
]
