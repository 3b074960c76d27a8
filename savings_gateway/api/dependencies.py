"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from savings_gateway.domain.registry import BankRegistry, RegistryHolder

registry_holder = RegistryHolder()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_registry() -> BankRegistry:
    """Provide the current bank snapshot"""
    return registry_holder.current
