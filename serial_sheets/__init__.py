"""Serial/lot number sheet builder.

Reshapes pasted text or uploaded tables into fixed eleven-column item
tracking rows, groups them into named sheets and exports a multi-sheet
workbook with a summary.
"""

__version__ = "0.1.0"
