"""Shared utilities for the server wrapper."""
