# Routes package init
"""
Order Desk Backend - API Routes Package
=========================================

Route Inventory:
    - actions.py: POST /         (every client-app action, JSON envelope)
    - health.py:  GET  /         (plain-text liveness string)
                  GET  /health   (JSON dependency status)

Routes stay thin: read the request, call the ActionRouter, serialize.
"""
