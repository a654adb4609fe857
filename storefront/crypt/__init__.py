"""
The `crypt` package provides the password crypt injected into the
account provider.

Contents
--------
- passwords
    `PasswordCrypt`:
        * `hash_password` — hashes plaintext passwords using bcrypt
        * `check` — verifies a plaintext candidate against a stored hash
"""

from storefront.crypt.passwords import PasswordCrypt

__all__ = ["PasswordCrypt"]
