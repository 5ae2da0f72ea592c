"""Stub GCM send server: one endpoint, a logging middleware, a supervisor."""

__version__ = "0.1.0"
