# Middleware package init
"""
Catalog API — Middleware Package
==================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID FIRST: correlation ID for logs and error bodies
    2. Logging: one access line per request, with duration and request ID
"""
