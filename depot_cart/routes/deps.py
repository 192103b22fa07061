"""Route dependencies"""

from fastapi import Request

from ..engine import CartEngine


def get_engine(request: Request) -> CartEngine:
    """The engine created at application startup"""
    return request.app.state.engine
