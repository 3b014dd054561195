"""
Per-resource repository modules for database access.
"""
