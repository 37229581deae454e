"""
Portfolio Backend — Application Package
=========================================

    ┌─────────────────────────────────────┐
    │   Routes + auth dependency (HTTP)   │
    ├─────────────────────────────────────┤
    │       Services (business rules)     │
    ├─────────────────────────────────────┤
    │   Models (SQLAlchemy) + Schemas     │
    ├─────────────────────────────────────┤
    │   Database handle (async sessions)  │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
