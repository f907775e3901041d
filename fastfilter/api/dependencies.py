"""Shared FastAPI dependencies."""

from fastapi import Request

from fastfilter.application.filter_service import FilterService
from fastfilter.infrastructure.context import AppContext


def get_context(request: Request) -> AppContext:
    """Get the application context built at startup."""
    return request.app.state.context


def get_filter_service(request: Request) -> FilterService:
    """Get a filter service with a fresh per-request cache."""
    return get_context(request).new_filter_service()
