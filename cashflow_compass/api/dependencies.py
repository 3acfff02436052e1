"""Dependency injection for FastAPI endpoints"""

from datetime import date

from fastapi import Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Server clock, used when the caller does not pin `now`"""
    return date.today()
