"""notecards - saved content dashboard."""

__version__ = "0.1.0"
