"""
Password hashing with bcrypt.

Hashing is deliberately slow; call these from a worker thread when inside
the event loop.
"""

import bcrypt


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash password with bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (4-31)

    Returns:
        Bcrypt hash string (salt embedded)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash with constant-time comparison.

    Returns:
        True if password matches, False otherwise (including unparseable hashes)
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Invalid hash format
        return False
