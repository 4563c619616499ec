from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict, List, Optional, Union


class EtiquetaForm(BaseModel):
    """Campos do formulário como digitados; a validação fica no serviço."""
    op: Optional[Union[int, str]] = None
    carimbadeira: Optional[Union[int, str]] = None
    componente: Optional[Union[int, str]] = None
    quantidade_etiqueta: Optional[Union[int, float, str]] = None
    quantidade_maquina: Optional[Union[int, float, str]] = None


class EtiquetaBase(BaseModel):
    op: str
    carimbadeira: str
    componente: Optional[str] = None
    quantidade_etiqueta: int
    quantidade_maquina: int
    percentual_erro: float


class EtiquetaResponse(EtiquetaBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResumoResponse(BaseModel):
    total_registros: int
    media_geral: float
    media_por_carimbadeira: Dict[str, float]
    media_por_componente: Dict[str, float]
    desatualizado: bool = Field(False, description="Resumo da última leitura bem-sucedida")

    model_config = ConfigDict(from_attributes=True)


class EtiquetaCreatedResponse(BaseModel):
    mensagem: str
    registro: EtiquetaResponse
    resumo: ResumoResponse


class PainelResponse(BaseModel):
    registros: List[EtiquetaResponse]
    resumo: ResumoResponse


class ConfiguracaoResponse(BaseModel):
    carimbadeiras: List[str]
    componentes: List[str]
    op_format: str
    op_max_digits: int


class OpFormatadaResponse(BaseModel):
    op: str
