"""Admin password hashing with bcrypt.

bcrypt is called directly rather than through passlib, which does not work
with bcrypt 4.x on current Python releases.
"""

import bcrypt


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password`` as text."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login attempt against a stored admin hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )
