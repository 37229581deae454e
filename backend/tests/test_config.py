"""
Configuration and Bootstrap Tests
===================================

What we test:
    ✅ Missing JWT secret or Cloudinary credentials abort app construction
    ✅ Bootstrap is idempotent and never overwrites the admin
"""

import pytest
from sqlalchemy import func, select

from app.config import Settings
from app.exceptions import ConfigurationError
from app.models.category import Category
from app.models.user import User
from app.services.bootstrap import bootstrap_database
from app.services.password_hasher import password_hasher


class TestSettingsValidation:

    def test_missing_jwt_secret(self, settings):
        invalid = settings.model_copy(update={"jwt_secret": ""})
        with pytest.raises(ConfigurationError) as exc_info:
            invalid.validate_required()
        assert "JWT_SECRET" in exc_info.value.message

    def test_cloudinary_requires_credentials(self, settings):
        invalid = settings.model_copy(update={"media_backend": "cloudinary", "cloudinary_api_key": ""})
        with pytest.raises(ConfigurationError) as exc_info:
            invalid.validate_required()
        assert "CLOUDINARY_API_KEY" in exc_info.value.message

    def test_local_backend_needs_no_cloudinary(self, settings):
        settings.validate_required()

    def test_create_app_refuses_to_start_without_secret(self, settings):
        from app.main import create_app

        with pytest.raises(ConfigurationError):
            create_app(settings.model_copy(update={"jwt_secret": ""}))

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_level="verbose")

    def test_public_base_url_trailing_slash_removed(self):
        assert Settings(_env_file=None, public_base_url="https://cdn.example.com/").public_base_url == (
            "https://cdn.example.com"
        )


class TestBootstrap:

    @pytest.mark.asyncio
    async def test_bootstrap_is_idempotent(self, app, settings):
        database = app.state.database

        await bootstrap_database(database, settings, password_hasher)

        async with database.session() as db:
            users = (await db.execute(select(func.count()).select_from(User))).scalar_one()
            categories = (await db.execute(select(func.count()).select_from(Category))).scalar_one()
        assert users == 1
        assert categories == 3

    @pytest.mark.asyncio
    async def test_existing_admin_password_kept(self, app, settings, test_client, auth_headers):
        await test_client.put(
            "/api/auth/change-password",
            json={"currentPassword": settings.admin_password, "newPassword": "changed-pass"},
            headers=auth_headers,
        )

        await bootstrap_database(app.state.database, settings, password_hasher)

        response = await test_client.post(
            "/api/auth/login", json={"username": settings.admin_username, "password": "changed-pass"},
        )
        assert response.status_code == 200
