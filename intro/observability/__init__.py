"""Observability helpers for the devices service.

Request IDs + structlog contextvars for logs, and Prometheus collectors held in a
private registry that the metrics listener exports.
"""
