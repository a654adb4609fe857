import bcrypt


class PasswordCrypt:
    """
    bcrypt-backed password crypt for the account provider.

    Any object exposing the same two methods can be injected instead.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password using bcrypt with a generated salt.
    check(stored: str, candidate: str) -> bool
        Verifies a candidate plaintext password against a stored hash.
    """

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds : int, optional
            bcrypt cost factor. Default is 12.
        """
        self.rounds = rounds

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check(self, stored: str, candidate: str) -> bool:
        """
        Verify if a candidate password matches a stored hash.

        A missing or malformed stored hash never matches.
        """
        if not stored or candidate is None:
            return False
        try:
            return bcrypt.checkpw(candidate.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            # stored value is not a bcrypt hash
            return False
