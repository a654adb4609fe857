import logging

from storefront import configure_logging
from storefront.database.config.config import Settings
from storefront.database.config.connection_engine import connection_url, create_connection_engine


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.DB_DRIVER_NAME == "sqlite"
    assert settings.ACCOUNT_FIELDS == []
    assert settings.ACCOUNT_INACTIVE_FIELD is None


def test_environment(monkeypatch):
    monkeypatch.setenv("ACCOUNT_FIELDS", '["nickname", "company"]')
    monkeypatch.setenv("ACCOUNT_INACTIVE_FIELD", "disabled")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.ACCOUNT_FIELDS == ["nickname", "company"]
    assert settings.ACCOUNT_INACTIVE_FIELD == "disabled"
    assert settings.LOG_LEVEL == "DEBUG"


def test_connection_url():
    settings = Settings(_env_file=None, DB_DRIVER_NAME="postgresql", DB_USERNAME="shop",
                        DB_PASSWORD="secret", DB_HOST="db.example.com", DB_PORT=5432,
                        DB_DATABASE_NAME="shop")

    url = connection_url(settings)

    assert url.drivername == "postgresql"
    assert url.host == "db.example.com"
    assert url.port == 5432
    assert url.database == "shop"
    assert url.password == "secret"


def test_create_connection_engine():
    engine = create_connection_engine(Settings(_env_file=None))

    assert engine.dialect.name == "sqlite"
    engine.dispose()


def test_configure_logging():
    logger = configure_logging("DEBUG")

    assert logger.name == "storefront"
    assert logger.level == logging.DEBUG
    configure_logging(logging.WARNING)
