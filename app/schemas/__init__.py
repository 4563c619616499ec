from app.schemas.etiqueta import (
    EtiquetaForm,
    EtiquetaResponse,
    ResumoResponse,
    EtiquetaCreatedResponse,
    PainelResponse,
    ConfiguracaoResponse,
    OpFormatadaResponse,
)

__all__ = [
    "EtiquetaForm",
    "EtiquetaResponse",
    "ResumoResponse",
    "EtiquetaCreatedResponse",
    "PainelResponse",
    "ConfiguracaoResponse",
    "OpFormatadaResponse",
]
