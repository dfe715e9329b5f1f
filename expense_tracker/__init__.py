"""
Expense Tracker - Source Package

A personal wallet and expense tracker with a single-page Streamlit UI.

DESIGN PRINCIPLES:
1. One explicit state object, saved after every change
2. Validate at entry, never silently correct
3. Every change is audited
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
