"""
Script para cargar los intereses de ejemplo del portafolio.

REEMPLAZA la coleccion "interests" completa: primero la vacia y despues
inserta la lista SAMPLE_INTERESTS con createdAt/updatedAt. Util para
levantar un entorno nuevo o volver a un estado conocido.

Cada interes pasa por el mismo esquema (InterestIn) que usa la API, asi
un dato de ejemplo mal escrito falla aqui y no en el frontend.

Uso:
    python scripts/seed_interests.py

Requisitos:
    - Paquete instalado (pip install -e .)
    - MONGODB_URI y MONGODB_DB apuntando a la base del portafolio
"""

from portfolio.models.schemas import InterestIn
from portfolio.services.documents import DocumentStore

# El campo "icon" es el nombre de un icono de lucide-react en el frontend.
SAMPLE_INTERESTS = [
    {
        "title": "Digital Design",
        "icon": "Cpu",
        "description": "ASIC/FPGA implementation, RTL design, RISC-V architectures, and hardware accelerator development",
        "order": 1,
    },
    {
        "title": "Embedded Systems",
        "icon": "Wrench",
        "description": "IoT solutions, embedded systems design, firmware development, and real-time systems",
        "order": 2,
    },
    {
        "title": "PCB Design",
        "icon": "Code",
        "description": "Advanced PCB design, high-speed circuit design, signal integrity, and hardware prototyping",
        "order": 3,
    },
    {
        "title": "Research & Development",
        "icon": "Database",
        "description": "Contributing to cutting-edge research in digital systems, hardware design, and embedded technologies",
        "order": 4,
    },
    {
        "title": "Innovation",
        "icon": "Award",
        "description": "Exploring emerging technologies, developing innovative solutions, and staying current with industry trends",
        "order": 5,
    },
    {
        "title": "Continuous Learning",
        "icon": "User",
        "description": "Always expanding knowledge in hardware systems, new tools, and methodologies in electronic engineering",
        "order": 6,
    },
]


def seed(store: DocumentStore = None) -> int:
    """Reemplaza los intereses y retorna cuantos se insertaron."""
    documents = [InterestIn(**interest).model_dump() for interest in SAMPLE_INTERESTS]
    store = store or DocumentStore()
    return store.replace_all("interests", documents)


if __name__ == "__main__":
    inserted = seed()
    print(f"Inserted {inserted} interests")
