"""Password hashing and session token generation."""
import hashlib
import hmac
import secrets

SALT_BYTES = 16
SESSION_ID_BYTES = 32


def _digest(salt: bytes, password: str) -> str:
    return hashlib.sha256(salt + password.encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    """Return "<hex salt>:<hex sha256(salt + password)>".

    Single round, no key stretching.
    """
    salt = secrets.token_bytes(SALT_BYTES)
    return f"{salt.hex()}:{_digest(salt, password)}"


def verify_password(plain: str, stored: str | None) -> bool:
    """Check plain against a stored hash. Malformed hashes never raise."""
    if not stored:
        return False
    salt_hex, _, digest_hex = stored.partition(":")
    if not salt_hex or not digest_hex:
        return False
    try:
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    computed = _digest(salt, plain)
    return hmac.compare_digest(computed.encode("ascii"), digest_hex.encode("utf-8"))


def generate_session_id() -> str:
    """64 hex chars from the OS CSPRNG; collisions are not checked."""
    return secrets.token_hex(SESSION_ID_BYTES)
