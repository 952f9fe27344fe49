"""
Tests for configuration validation and the health endpoints
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from gig_guide.app import create_app
from gig_guide.config import Config, config
from gig_guide.db import Base, engine
from gig_guide.main import build_parser, expire_features, seed_features


@pytest.fixture
def settings():
    return Config()


class TestConfig:

    def test_test_environment_is_valid(self, settings):
        assert settings.ENV == "test"
        assert settings.errors == []
        assert settings.is_sqlite
        assert not settings.is_dev

    def test_short_secret_key(self, settings):
        settings.SECRET_KEY = "too-short"
        assert any("SECRET_KEY" in error for error in settings._validate())

    def test_prod_requires_postgres_and_https(self, settings):
        settings.ENV = "prod"
        errors = settings._validate()
        assert any("PostgreSQL" in error for error in errors)
        assert any("HTTPS" in error for error in errors)

    def test_prod_fails_fast(self, settings):
        settings.ENV = "prod"
        settings.errors = settings._validate()
        with pytest.raises(SystemExit):
            settings._report()

    def test_unknown_env(self, settings):
        settings.ENV = "qa"
        assert any("Invalid ENV" in error for error in settings._validate())

    def test_media_base_url_falls_back_to_api(self, settings):
        settings.API_BASE_URL = "https://api.example.com/"
        settings.MEDIA_BASE_URL = ""
        assert settings.media_base_url == "https://api.example.com"

        settings.MEDIA_BASE_URL = "https://cdn.example.com"
        assert settings.media_base_url == "https://cdn.example.com"

    def test_size_limits(self):
        assert config.max_request_bytes == 2 * 1024 * 1024
        assert config.max_upload_bytes == 10 * 1024 * 1024


class TestHealth:

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Gig Guide API", "status": "running"}

    def test_health(self, client, db_session):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"
        assert body["service"] == "gig-guide"

    def test_startup_creates_sqlite_tables(self):
        Base.metadata.drop_all(bind=engine)
        assert not inspect(engine).has_table("users")
        try:
            with TestClient(create_app(init_database=True)) as client:
                assert inspect(engine).has_table("users")
                assert client.get("/health").json()["database"] == "ok"
        finally:
            Base.metadata.drop_all(bind=engine)

    def test_startup_without_init_leaves_schema_alone(self):
        Base.metadata.drop_all(bind=engine)
        with TestClient(create_app(init_database=False)):
            assert not inspect(engine).has_table("users")


class TestCli:

    def test_parser(self):
        args = build_parser().parse_args(["serve", "--port", "9000"])
        assert args.command == "serve"
        assert args.port == 9000

    def test_seed_then_expire(self, db_session, capsys):
        assert seed_features() == (4, 0)
        assert seed_features() == (0, 4)
        assert expire_features() == 0
        assert "Expired 0" in capsys.readouterr().out
