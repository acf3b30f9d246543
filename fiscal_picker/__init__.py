"""
FiscalPicker - Fiscal Calendar Date and Month Picker Engine.

Computes fiscal week and fiscal year annotations for calendar dates under a
configurable fiscal start month, and builds the day and month grids a picker
front end renders.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "FiscalPicker Team"
