"""Serving pipeline: dispatch, error responses, and the process runner."""
