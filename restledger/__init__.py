"""RestLedger — productivity reports from a work/break session log."""

__version__ = "1.0.0"
