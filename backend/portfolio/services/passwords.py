"""Hashing de contrasenas de administrador con bcrypt (via passlib)."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    # Un hash corrupto en la base no debe tumbar el login: cuenta como
    # credenciales invalidas.
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False
