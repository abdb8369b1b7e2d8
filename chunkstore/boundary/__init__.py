"""Boundary layer: database store and remote embedding provider adapters."""
