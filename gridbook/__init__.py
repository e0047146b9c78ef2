"""Write .xlsx spreadsheets with styled cells, merged ranges and in-cell pictures."""

__version__ = "0.1.0"