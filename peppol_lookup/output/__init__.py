"""Output formatting and export for Peppol directory lookup."""

from peppol_lookup.output.formatter import ConsoleFormatter
from peppol_lookup.output.exporter import ResultExporter

__all__ = ["ConsoleFormatter", "ResultExporter"]
