"""
Portfolio Backend — Middleware Package
========================================

Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

auth.py is not a Starlette middleware: it is the `require_auth` dependency
that admin routes declare, so public routes never touch the token code.
"""
