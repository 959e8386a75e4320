# File: cadence/api/endpoints/__init__.py
"""
API endpoints package for Cadence.
"""

from cadence.api.endpoints import occurrences, recurrences
