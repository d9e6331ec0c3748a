"""
Script para crear (o actualizar) un administrador del panel.

El panel no tiene registro publico: la unica forma de obtener una cuenta
es ejecutar este script con acceso directo a la base. La contrasena se
pide por teclado (sin eco) y se guarda como hash bcrypt; el texto plano
nunca llega a MongoDB ni a la historia de la terminal.

Si el username ya existe, se actualizan su email y su contrasena. Sirve
tambien para "resetear" una contrasena olvidada.

Uso:
    python scripts/create_admin.py USERNAME EMAIL

Requisitos:
    - Paquete instalado (pip install -e .)
    - MONGODB_URI y MONGODB_DB apuntando a la base del portafolio
"""

import getpass
import sys

from portfolio.models.schemas import LoginRequest
from portfolio.services.documents import DocumentStore
from portfolio.services.passwords import hash_password


def create_admin(username: str, email: str, password: str, store: DocumentStore = None) -> None:
    """
    Valida las credenciales con las mismas reglas del login y guarda el
    admin. Lanza pydantic.ValidationError si el username o la contrasena
    no cumplen las reglas (ej: username con espacios).
    """
    credentials = LoginRequest(username=username, password=password)
    store = store or DocumentStore()
    store.upsert_admin(credentials.username, email.strip().lower(), hash_password(credentials.password))


def main(argv: list[str]) -> int:
    if len(argv) != 3:
        print("Usage: python scripts/create_admin.py USERNAME EMAIL")
        return 1

    username, email = argv[1], argv[2]

    # getpass lee sin mostrar los caracteres en pantalla.
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match")
        return 1

    create_admin(username, email, password)
    print(f"Admin '{username}' saved")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
