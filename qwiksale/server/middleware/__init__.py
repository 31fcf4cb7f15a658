"""
Middleware modules for the QwikSale server.

Request tracing and timing headers live here.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
