from typing import Optional

from passlib.context import CryptContext

# pbkdf2_sha256 first: bcrypt truncates at 72 bytes and is not always installed
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)
