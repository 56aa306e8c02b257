"""PKCE (Proof Key for Code Exchange) utilities for OAuth security."""

import secrets
from base64 import urlsafe_b64encode
from hashlib import sha256


def generate_pkce_pair() -> tuple[str, str]:
    """Generate PKCE verifier and challenge for OAuth authorization.

    The challenge goes in the authorization request, the verifier in the
    token exchange.

    Returns:
        Tuple of (verifier, challenge), both base64url encoded without padding
    """
    # 64 random bytes encode to 86 characters, inside the 43-128 range
    verifier = urlsafe_b64encode(secrets.token_bytes(64)).rstrip(b"=").decode("ascii")

    challenge_bytes = sha256(verifier.encode("ascii")).digest()
    challenge = urlsafe_b64encode(challenge_bytes).rstrip(b"=").decode("ascii")

    return (verifier, challenge)
