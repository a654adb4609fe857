import pytest

from storefront.database.daos import AccountProvider, RoleMode
from storefront.database.errors import ExecuteError


class SpyCrypt:
    """Wraps a crypt and records every password check."""

    def __init__(self, crypt):
        self.crypt = crypt
        self.checks = []

    def check(self, stored, candidate):
        self.checks.append(candidate)
        return self.crypt.check(stored, candidate)

    def hash_password(self, text):
        return self.crypt.hash_password(text)


@pytest.fixture
def accounts(query, crypt):
    query.insert("users", {"uid": 1, "username": "racke", "email": "racke@example.com",
                           "password": crypt.hash_password("nevairbe"), "nickname": "Racke",
                           "disabled": 0})
    query.insert("users", {"uid": 2, "username": "blocked", "email": "blocked@example.com",
                           "password": crypt.hash_password("secret"), "nickname": "Blocked",
                           "disabled": 1})
    query.insert("users", {"uid": 5, "username": "shopper", "email": "shopper@example.com",
                           "password": crypt.hash_password("old"), "nickname": None,
                           "disabled": 0})

    for rid, name in ((1, "admin"), (2, "editor"), (3, "customer")):
        query.insert("roles", {"rid": rid, "name": name})
    for uid, rid in ((1, 1), (1, 2), (5, 3)):
        query.insert("user_roles", {"uid": uid, "rid": rid})

    query.insert("permissions", {"uid": 1, "perm": "view_stats"})
    query.insert("permissions", {"rid": 1, "perm": "manage_users"})
    query.insert("permissions", {"rid": 2, "perm": "edit_products"})
    query.insert("permissions", {"rid": 2, "perm": "view_stats"})
    query.insert("permissions", {"rid": 3, "perm": "place_orders"})
    return query


@pytest.fixture
def provider(connection, crypt, accounts):
    return AccountProvider(connection, crypt, fields=["nickname"], inactive="disabled")


def test_login(provider):
    account = provider.login("racke@example.com", "nevairbe")

    assert account["uid"] == 1
    assert account["username"] == "racke"
    assert account["nickname"] == "Racke"
    assert sorted(account["roles"]) == ["admin", "editor"]
    assert sorted(account["permissions"]) == ["edit_products", "manage_users", "view_stats", "view_stats"]
    assert "password" not in account
    assert "disabled" not in account


def test_login_wrong_password(provider):
    assert provider.login("racke@example.com", "wrong") is False


def test_login_unknown_user(provider):
    assert provider.login("nobody@example.com", "nevairbe") is False


def test_login_matches_email_not_username(provider):
    assert provider.login("racke", "nevairbe") is False


def test_login_disabled_account_skips_password_check(connection, crypt, accounts):
    spy = SpyCrypt(crypt)
    provider = AccountProvider(connection, spy, inactive="disabled")

    assert provider.login("blocked@example.com", "secret") is False
    assert spy.checks == []


def test_login_without_inactive_field(connection, crypt, accounts):
    provider = AccountProvider(connection, crypt)

    account = provider.login("blocked@example.com", "secret")

    assert account["uid"] == 2
    assert account["roles"] == []
    assert account["permissions"] == []


def test_roles_modes(provider):
    assert provider.roles(1, RoleMode.MAP) == {1: "admin", 2: "editor"}
    assert sorted(provider.roles(1, RoleMode.NUMERIC)) == [1, 2]
    assert sorted(provider.roles(1)) == ["admin", "editor"]
    assert provider.roles(1, "names") == provider.roles(1, RoleMode.NAMES)
    assert provider.roles(42) == []


def test_permissions_union(provider):
    assert provider.permissions(5, [3]) == ["place_orders"]
    assert provider.permissions(1, []) == ["view_stats"]
    assert sorted(provider.permissions(1, [1, 2])) == ["edit_products", "manage_users", "view_stats", "view_stats"]


def test_exists(provider):
    assert provider.exists("shopper") == 5
    assert provider.exists("nobody") is None


def test_value_and_set_value(provider):
    assert provider.value("racke", "nickname") == "Racke"
    assert provider.set_value("racke", "nickname", "Stefan") is True
    assert provider.value("racke", "nickname") == "Stefan"


def test_value_unknown_user(provider):
    assert provider.value("nobody", "nickname") is None
    assert provider.set_value("nobody", "nickname", "x") is False


def test_value_unknown_column(provider):
    with pytest.raises(ExecuteError):
        provider.value("racke", "no_such_column")


def test_password_change(provider):
    assert provider.password("new", "shopper") is True

    assert provider.login("shopper@example.com", "new")["uid"] == 5
    assert provider.login("shopper@example.com", "old") is False


def test_password_unknown_user(provider):
    assert provider.password("new", "nobody") is False
    assert provider.password("new") is False


def test_update_password_then_login(provider, query, crypt):
    query.update(table="users", set={"password": crypt.hash_password("new")}, where={"uid": 5})

    assert provider.login("shopper@example.com", "new")["roles"] == ["customer"]
    assert provider.login("shopper@example.com", "old") is False


def test_from_settings(connection, crypt, accounts, test_settings):
    settings = test_settings.model_copy(update={"ACCOUNT_FIELDS": ["nickname"],
                                                "ACCOUNT_INACTIVE_FIELD": "disabled"})

    provider = AccountProvider.from_settings(connection, crypt, settings)

    assert provider.fields == ("nickname",)
    assert provider.inactive == "disabled"
    assert provider.login("blocked@example.com", "secret") is False


def test_crypt_is_required(connection):
    with pytest.raises(ValueError):
        AccountProvider(connection, None)
