# Middleware package init
"""
Users API — Middleware Package
================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID before anything logs
    2. Logging: Log request details with the generated request ID
    3. GZip / CORS: Applied by Starlette's built-in middleware
"""
