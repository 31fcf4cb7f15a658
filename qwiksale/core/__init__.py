"""Shared building blocks (logging, monitoring, persistence, models) for QwikSale."""
