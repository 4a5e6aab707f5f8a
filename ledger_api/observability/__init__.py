"""Observability helpers.

Request IDs + structlog contextvars for logs, and a prometheus registry
shared by the request middleware and the store gateway.
"""
