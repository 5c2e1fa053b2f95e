# Middleware package init
"""
Roster Backend: Middleware Package
====================================

Middleware Chain (request direction):
    Request → [Request ID] → [Access Logging] → [CORS] → Route Handler

The request id is assigned first so the access log line and any error
response for the same request carry it.
"""
