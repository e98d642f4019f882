"""Shared infrastructure: config, exceptions, observability."""
