"""
Site catalog package.

This package owns the catalog behind the marketing site: building projects
and their unit configurations, the photo gallery, inbound contact messages and
the global site settings document. It provides interchangeable store
backends, a synchronization layer that keeps an in-memory snapshot consistent
with the configured store, and a FastAPI application exposing the store over
HTTP.
"""
