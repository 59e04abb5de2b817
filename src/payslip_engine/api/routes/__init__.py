"""API routes."""

from payslip_engine.api.routes.deductions import router as deductions_router
from payslip_engine.api.routes.employments import router as employments_router
from payslip_engine.api.routes.health import router as health_router
from payslip_engine.api.routes.payroll import router as payroll_router

__all__ = ["deductions_router", "employments_router", "health_router", "payroll_router"]
