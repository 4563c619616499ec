"""
Router para endpoints de etiquetas (registro e indicadores das carimbadeiras)
"""
import logging
from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from app.schemas.etiqueta import (
    ConfiguracaoResponse,
    EtiquetaCreatedResponse,
    EtiquetaForm,
    EtiquetaResponse,
    OpFormatadaResponse,
    PainelResponse,
    ResumoResponse,
)
from app.services.etiqueta_service import (
    EtiquetaPanel,
    FormValidationError,
    SubmissionInProgressError,
    build_panel,
)
from app.services.normalizer import OP_FORMAT_DIGITOS, format_order_code, format_order_code_digits
from app.services.record_store import StoreError

logger = logging.getLogger(__name__)
router = APIRouter()

ERRO_LEITURA = "Não foi possível carregar os registros."


def get_panel(request: Request) -> EtiquetaPanel:
    """Painel único da aplicação, criado na primeira requisição."""
    panel = getattr(request.app.state, "panel", None)
    if panel is None:
        panel = build_panel()
        request.app.state.panel = panel
    return panel


def _resumo(panel: EtiquetaPanel, desatualizado: bool = False) -> ResumoResponse:
    return ResumoResponse(**asdict(panel.summary()), desatualizado=desatualizado)


def _refresh(panel: EtiquetaPanel):
    try:
        return panel.refresh()
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ERRO_LEITURA
        )


@router.post(
    "/etiquetas",
    response_model=EtiquetaCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_etiqueta(
    form: EtiquetaForm,
    panel: EtiquetaPanel = Depends(get_panel)
):
    """
    Registra um lote: OP, carimbadeira, componente e as duas quantidades.

    O percentual de erro é calculado aqui, nunca recebido do cliente.
    Em caso de erro o formulário é devolvido para que o usuário possa
    corrigir e tentar de novo.
    """
    form_data = form.model_dump()

    try:
        result = panel.submit(form_data)
    except FormValidationError as e:
        return JSONResponse(
            status_code=422,
            content={
                "mensagem": "Verifique os campos do formulário.",
                "erros": e.errors,
                "formulario": form_data,
            }
        )
    except SubmissionInProgressError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"mensagem": str(e), "formulario": form_data}
        )
    except StoreError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "mensagem": "Não foi possível salvar o registro.",
                "formulario": form_data,
            }
        )

    return EtiquetaCreatedResponse(
        mensagem="Registro adicionado com sucesso.",
        registro=EtiquetaResponse.model_validate(result.registro),
        resumo=ResumoResponse(**asdict(result.resumo), desatualizado=result.desatualizado),
    )


@router.get("/etiquetas", response_model=List[EtiquetaResponse])
async def list_etiquetas(panel: EtiquetaPanel = Depends(get_panel)):
    """Lista todos os registros, do mais recente para o mais antigo"""
    return list(_refresh(panel))


@router.get("/etiquetas/resumo", response_model=ResumoResponse)
async def resumo_etiquetas(panel: EtiquetaPanel = Depends(get_panel)):
    """
    Médias do percentual de erro: geral, por carimbadeira e por componente.
    Carimbadeiras e componentes sem registros aparecem com 0.0.
    """
    _refresh(panel)
    return _resumo(panel)


@router.get("/etiquetas/painel", response_model=PainelResponse)
async def painel_etiquetas(panel: EtiquetaPanel = Depends(get_panel)):
    """Registros e resumo calculados sobre a mesma leitura"""
    records = _refresh(panel)
    return PainelResponse(
        registros=[EtiquetaResponse.model_validate(r) for r in records],
        resumo=_resumo(panel),
    )


@router.get("/etiquetas/formatar-op", response_model=OpFormatadaResponse)
async def formatar_op(
    valor: str = Query("", description="OP como digitada"),
    panel: EtiquetaPanel = Depends(get_panel)
):
    """Formata a OP a cada tecla, no formato configurado"""
    if panel.op_format == OP_FORMAT_DIGITOS:
        return OpFormatadaResponse(op=format_order_code_digits(valor, panel.op_max_digits))
    return OpFormatadaResponse(op=format_order_code(valor))


@router.get("/configuracao", response_model=ConfiguracaoResponse)
async def configuracao(panel: EtiquetaPanel = Depends(get_panel)):
    """Carimbadeiras e componentes disponíveis no formulário"""
    return ConfiguracaoResponse(
        carimbadeiras=list(panel.carimbadeiras),
        componentes=list(panel.componentes),
        op_format=panel.op_format,
        op_max_digits=panel.op_max_digits,
    )
