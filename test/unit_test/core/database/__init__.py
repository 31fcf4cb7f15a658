"""Unit tests for the database layer in qwiksale/core/database.

Repository and utility tests run against in-memory SQLite.
"""
