"""Password hashing for tenant staff accounts.

Uses bcrypt with automatic salt generation. Hashing is CPU-bound, so the
async helpers run it in a worker thread to keep the event loop responsive.
"""

import asyncio

import bcrypt


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: The plaintext password

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a plaintext password against a bcrypt hash.

    Args:
        password: The plaintext password to verify
        hashed: The stored bcrypt hash

    Returns:
        True if the password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed hash
        return False


async def hash_password_async(password: str) -> str:
    """Hash a password off the event loop."""
    return await asyncio.to_thread(hash_password, password)
