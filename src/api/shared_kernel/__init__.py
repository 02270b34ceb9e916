"""Shared Kernel module.

Components that both the Tenancy and Fleet contexts depend on: bearer
token validation, the stable error envelope, and the request-scoped
tenant context with its middleware. Nothing here may import a bounded
context at runtime.
"""
