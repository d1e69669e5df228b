# Services package init
"""
Order Desk Backend - Services Layer
=====================================

What:  Business logic between the HTTP routes and the external collaborators.
How:   Services are plain objects wired together once in main.py and shared
       by every request; none of them keeps per-request state.

Service Inventory:
    - SheetStore (abstract): Interface for the tabular data store
    - GoogleSheetStore: gspread-backed implementation
    - InMemorySheetStore: fixture tables (tests, SHEET_BACKEND=json)
    - QueryService: client lookup and merged orders feed
    - NotificationService: OneSignal push notifications over httpx
    - OrderService: order status updates (acknowledged, not written)
    - ActionRouter: action name → handler, failures → error envelopes
"""
