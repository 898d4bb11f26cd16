"""
Invoice Tracker Package

This package provides a FastAPI server for tracking invoices stored in
Supabase, with spreadsheet/PDF export and AI-assisted field extraction
from photographed invoices.
"""

__version__ = "1.0.0"
__author__ = "Invoice Tracker Team"
