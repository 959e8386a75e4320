"""Cadence: recurring date calculation and description service."""
