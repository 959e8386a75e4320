# File: cadence/api/__init__.py
"""
API package for Cadence.

This package contains the API layer for the Cadence application,
including endpoints, dependencies, and routing configuration.
"""

from cadence.api import deps, endpoints
from cadence.api.api import api_router
