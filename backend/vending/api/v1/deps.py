"""FastAPI dependencies."""

from fastapi import Request

from ...core.vendor_session import VendorSession


def get_vendor_session(request: Request) -> VendorSession:
    """Vendor session created by the application lifespan."""
    return request.app.state.vendor_session
