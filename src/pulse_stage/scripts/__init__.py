"""Operational scripts for the Pulse Stage application."""
