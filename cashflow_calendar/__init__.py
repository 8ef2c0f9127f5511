"""
Cashflow Calendar - Source Package

A personal finance tracker that projects an account balance forward in time
from a starting balance plus recurring and one-time income and expenses.

DESIGN PRINCIPLES:
1. The engine is a set of pure functions over explicit inputs
2. All dates are calendar dates (no local-time instants)
3. Bad data is skipped and logged, never crashes a projection
4. Storage, notifications and formatting are swappable boundaries
"""

__version__ = "1.0.0"
__author__ = "Cashflow Calendar Team"
