"""
SQLite persistence: connection management, schema, and lifecycle.
"""
