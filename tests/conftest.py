import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, text

from storefront.crypt import PasswordCrypt
from storefront.database.config.config import Settings
from storefront.database.config.connection_engine import create_connection_engine, metadata
from storefront.database.query import Query

# registers the account tables on the shared metadata
import storefront.database.entities  # noqa: F401

shop_metadata = MetaData()

Table(
    "products", shop_metadata,
    Column("sku", String(32), primary_key=True),
    Column("name", String(255)),
    Column("price", Integer),
    Column("media_type", String(32)),
    Column("inactive", Integer, default=0),
)

Table(
    "navigation_products", shop_metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("sku", String(32)),
    Column("navigation", Integer),
)


@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def engine(test_settings):
    engine = create_connection_engine(test_settings)
    yield engine
    engine.dispose()


@pytest.fixture
def connection(engine):
    with engine.connect() as connection:
        metadata.create_all(connection)
        shop_metadata.create_all(connection)
        connection.execute(text("ALTER TABLE users ADD COLUMN nickname VARCHAR(255)"))
        connection.execute(text("ALTER TABLE users ADD COLUMN disabled INTEGER DEFAULT 0"))
        yield connection


@pytest.fixture
def query(connection):
    return Query(connection)


@pytest.fixture(scope="session")
def crypt():
    return PasswordCrypt(rounds=4)
