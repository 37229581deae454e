"""
Portfolio Backend — Service Dependencies
==========================================

Service instances are built once by create_app() and stored on `app.state`;
these getters hand them to route handlers through Depends().
"""

from fastapi import Request

from app.services.auth_service import AuthService
from app.services.category_service import CategoryService
from app.services.photo_service import PhotoService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_photo_service(request: Request) -> PhotoService:
    return request.app.state.photo_service


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service
