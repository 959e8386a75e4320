"""Database models and session management for Cadence."""
