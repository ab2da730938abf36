"""
AuthGate Backend — API Routes Package
======================================

Route Inventory:
    - auth.py:    POST /api/auth/register, POST /api/auth/login,
                  POST /api/auth/logout, GET /api/auth/me
    - users.py:   GET  /api/users (admin only)
    - health.py:  GET  /health, GET /api

Routes stay thin: validate via dependencies, call a service, set cookies and
status codes. Business rules live in authgate.services.
"""
