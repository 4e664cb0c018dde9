"""
Per-domain repository modules for database access.

Routers and services call these functions with a request-scoped ``Session``;
they return ORM instances (or plain aggregates) and commit their own writes.
"""
