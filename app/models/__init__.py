from app.database import Base
from app.models.etiqueta import Etiqueta

__all__ = [
    "Base",
    "Etiqueta",
]
