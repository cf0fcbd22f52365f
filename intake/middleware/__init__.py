# Middleware package init
"""
Record Intake Service — Middleware Package
============================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → [CORS] → Route

    - Request ID is set before anything logs.
    - Logging sees the final status code, including error responses.
    - Security headers are applied to every response, errors included.
"""
