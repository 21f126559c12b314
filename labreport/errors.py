"""Exceptions raised by the report engine."""


class ReportDataError(ValueError):
    """Report JSON could not be read into the report model."""


class ReportGenerationError(RuntimeError):
    """PDF generation aborted; no output file was written."""
