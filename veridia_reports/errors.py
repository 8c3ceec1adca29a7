class ReportInputError(ValueError):
    """Raised when an assembler receives input it cannot lay out safely."""
