"""
Province and city reference data (read-only).
"""
