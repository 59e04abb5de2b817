"""HTTP API for the payslip engine."""

from payslip_engine.api.app import create_app

__all__ = ["create_app"]
