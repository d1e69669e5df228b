# Middleware package init
"""
Order Desk Backend - Middleware Package
=========================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: access line with status and duration
    3. CORS: the client is a browser app served from another origin
"""
