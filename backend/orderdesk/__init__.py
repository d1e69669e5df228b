"""
Order Desk Backend - Application Package Initializer
=====================================================

What:  Marks the `orderdesk` directory as a Python package.
Who:   Imported by uvicorn (`orderdesk.main:app`), pytest, and the diagnostics CLI.

Architecture Note:
    The backend is a thin routing layer over an external spreadsheet and an
    external push-notification provider:

    ┌─────────────────────────────────────┐
    │     Routes (POST / , GET /)         │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Action Router                   │  ← action → handler, error → envelope
    ├─────────────────────────────────────┤
    │  Query / Notification / Order       │  ← business rules per action
    │  services                           │
    ├─────────────────────────────────────┤
    │  Sheet store  │  OneSignal (httpx)  │  ← external collaborators
    └─────────────────────────────────────┘

    Every POST answers with a JSON envelope `{status, message?, ...}`;
    handlers never let an exception reach the transport layer.
"""

__version__ = "1.3.0"
