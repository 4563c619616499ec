"""
Serviço de etiquetas: valida e grava registros, mantém a lista em memória
e calcula o resumo de erros por carimbadeira e por componente.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from app.config import settings
from app.services.aggregation import Summary, summarize
from app.services.error_calculator import check_actual, check_expected, error_percent
from app.services.normalizer import (
    InputValidationError,
    OP_FORMAT_SEPARADO,
    normalize_choice,
    normalize_order_code,
    to_quantity,
)
from app.services.record_store import RecordStore, StoreError, build_record_store

logger = logging.getLogger(__name__)


class FormValidationError(Exception):
    """Um ou mais campos do formulário são inválidos"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class SubmissionInProgressError(Exception):
    """Já existe uma gravação em andamento"""
    pass


@dataclass(frozen=True)
class SubmitResult:
    registro: Dict[str, Any]
    resumo: Summary
    # True quando a releitura após a gravação falhou
    desatualizado: bool = False


class EtiquetaPanel:
    """
    Dono da lista de registros em memória.

    A lista é uma tupla substituída inteira a cada leitura bem-sucedida;
    se a leitura falhar, a última lista válida continua valendo.
    Gravar segue o protocolo: gravar, invalidar, reler.
    """

    def __init__(
        self,
        store: RecordStore,
        carimbadeiras: Sequence[str],
        componentes: Sequence[str],
        op_format: str = OP_FORMAT_SEPARADO,
        op_max_digits: int = 10,
    ):
        self.store = store
        self.carimbadeiras = tuple(carimbadeiras)
        self.componentes = tuple(componentes)
        self.op_format = op_format
        self.op_max_digits = op_max_digits
        self._records: Tuple[Dict[str, Any], ...] = ()
        self._stale = True
        self._submit_lock = threading.Lock()

    @property
    def records(self) -> Tuple[Dict[str, Any], ...]:
        return self._records

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def submitting(self) -> bool:
        return self._submit_lock.locked()

    def invalidate(self) -> None:
        self._stale = True

    def refresh(self) -> Tuple[Dict[str, Any], ...]:
        """Lê todos os registros do armazenamento. StoreError é propagado."""
        try:
            records = tuple(self.store.list_all())
        except StoreError:
            logger.error("Error fetching etiquetas, keeping last list", exc_info=True)
            raise
        self._records = records
        self._stale = False
        return records

    def summary(self) -> Summary:
        return summarize(self._records, self.carimbadeiras, self.componentes)

    def validate(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """
        Normaliza o formulário e calcula o percentual de erro.

        Todos os campos são conferidos antes de levantar FormValidationError,
        para que o usuário veja todos os erros de uma vez.
        """
        errors: Dict[str, str] = {}
        record: Dict[str, Any] = {}

        def check(field: str, fn):
            try:
                record[field] = fn()
            except InputValidationError as e:
                errors[e.field] = e.message

        check("op", lambda: normalize_order_code(form.get("op"), self.op_format, self.op_max_digits))
        check("carimbadeira", lambda: normalize_choice(form.get("carimbadeira"), self.carimbadeiras, "carimbadeira"))
        check("componente", lambda: normalize_choice(form.get("componente"), self.componentes, "componente", required=False))
        check("quantidade_etiqueta", lambda: check_expected(to_quantity(form.get("quantidade_etiqueta"), "quantidade_etiqueta")))
        check("quantidade_maquina", lambda: check_actual(to_quantity(form.get("quantidade_maquina"), "quantidade_maquina")))

        if "quantidade_etiqueta" in record and "quantidade_maquina" in record:
            check("percentual_erro", lambda: error_percent(record["quantidade_etiqueta"], record["quantidade_maquina"]))

        if errors:
            raise FormValidationError(errors)
        return record

    def submit(self, form: Dict[str, Any]) -> SubmitResult:
        """
        Valida, grava, invalida a lista e relê.

        StoreError na gravação é propagado sem alterar a lista em memória.
        Falha na releitura não desfaz a gravação: o resumo volta marcado
        como desatualizado.
        """
        if not self._submit_lock.acquire(blocking=False):
            raise SubmissionInProgressError("Já existe um registro sendo salvo")

        try:
            record = self.validate(form)

            try:
                created = self.store.insert(record)
            except StoreError:
                logger.error("Error saving etiqueta", exc_info=True)
                raise

            logger.info(
                f"Etiqueta saved: op={created.get('op')} carimbadeira={created.get('carimbadeira')} "
                f"percentual_erro={created.get('percentual_erro')}"
            )
            self.invalidate()

            try:
                self.refresh()
            except StoreError:
                logger.warning("Etiqueta saved but list refresh failed")
                return SubmitResult(registro=created, resumo=self.summary(), desatualizado=True)

            return SubmitResult(registro=created, resumo=self.summary())
        finally:
            self._submit_lock.release()


def build_panel(store: Optional[RecordStore] = None) -> EtiquetaPanel:
    """Cria o painel com o armazenamento e as listas configuradas."""
    return EtiquetaPanel(
        store=store or build_record_store(),
        carimbadeiras=settings.CARIMBADEIRAS,
        componentes=settings.COMPONENTES,
        op_format=settings.OP_FORMAT,
        op_max_digits=settings.OP_MAX_DIGITS,
    )
