"""
Exception handlers for the QwikSale server.

Registers the catch-all handler that turns unexpected errors into a 500
response carrying an error id.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
