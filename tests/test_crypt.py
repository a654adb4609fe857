from storefront.crypt import PasswordCrypt


def test_hash_and_check(crypt):
    hashed = crypt.hash_password("nevairbe")

    assert hashed != "nevairbe"
    assert crypt.check(hashed, "nevairbe") is True
    assert crypt.check(hashed, "wrong") is False


def test_plaintext_stored_value_never_matches(crypt):
    assert crypt.check("nevairbe", "nevairbe") is False


def test_missing_values(crypt):
    assert crypt.check(None, "nevairbe") is False
    assert crypt.check("", "") is False
    assert crypt.check(crypt.hash_password("x"), None) is False


def test_rounds():
    assert PasswordCrypt(rounds=5).hash_password("x").startswith("$2b$05$")
