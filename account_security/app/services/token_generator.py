import hashlib
import secrets

TOKEN_BYTES = 32  # 256 bits of entropy


class TokenGenerator:
    """
    Produces opaque password reset tokens.

    Tokens are URL-safe base64 of 32 random bytes (43 characters).
    Only the SHA-256 hash of a token is ever stored.
    """

    def generate(self) -> str:
        return secrets.token_urlsafe(TOKEN_BYTES)

    @staticmethod
    def hash(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()
