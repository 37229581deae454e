"""
Portfolio Backend — API Routes Package
========================================

Route Inventory:
    - auth.py:        POST /api/auth/login, GET /api/auth/verify,
                      PUT /api/auth/change-password, PUT /api/auth/profile
    - photos.py:      GET/POST /api/photos, GET/PUT/DELETE /api/photos/{id}
    - categories.py:  GET /api/categories
    - health.py:      GET /api/health

Routes stay thin: extract request data, call a service, shape the response.
"""
