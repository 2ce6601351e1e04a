"""liftscript: a plain-text workout log with guided sessions."""

__version__ = "0.1.0"
