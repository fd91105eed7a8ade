"""Password hashing and token signing

passlib CryptContext for password hashes, python-jose for signed tokens.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from src.app.services.security import PasswordHasher, TokenService


class PasslibPasswordHasher(PasswordHasher):

    def __init__(self, schemes: Optional[list] = None):
        self.context = CryptContext(schemes=schemes or ["pbkdf2_sha256"], deprecated="auto")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self.context.verify(password, password_hash)
        except ValueError:
            # Unknown or malformed hash
            return False


class JoseTokenService(TokenService):
    """HMAC-signed JWTs carrying an exp claim"""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def issue(self, claims: Dict[str, Any], expires_at: datetime) -> str:
        to_encode = dict(claims)
        to_encode.update({"exp": expires_at})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None
