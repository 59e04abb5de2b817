"""Payslip engine: monthly payslip generation, approval and notification."""

__version__ = "1.0.0"
