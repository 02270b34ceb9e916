"""Shared middleware for cross-cutting concerns.

This module contains the request-scoped values and middleware shared across
bounded contexts: the resolved tenant context and request id propagation.
"""
