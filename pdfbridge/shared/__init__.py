"""Shared infrastructure: errors, logging, request context."""
