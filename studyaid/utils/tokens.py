"""
Bearer token helpers
"""
import time

import jwt


def token_expiry(token: str) -> float:
    """
    Read the `exp` claim (seconds since epoch) from a JWT without verifying it

    Raises:
        ValueError: token is not a decodable JWT or carries no exp claim
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise ValueError(f"Invalid token: {e}")

    if "exp" not in claims:
        raise ValueError("Token has no exp claim")
    return float(claims["exp"])


def is_expired(token: str, now: float = None) -> bool:
    """True when the token's exp claim has passed"""
    now = time.time() if now is None else now
    return now >= token_expiry(token)
