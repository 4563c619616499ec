"""
Armazenamento dos registros de etiquetas.

Duas implementações com a mesma interface estreita (insert / list_all):
banco relacional via SQLAlchemy ou a API REST do Supabase (PostgREST).
"""
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import SessionLocal
from app.models.etiqueta import Etiqueta

logger = logging.getLogger(__name__)

RECORD_FIELDS = (
    "op",
    "carimbadeira",
    "componente",
    "quantidade_etiqueta",
    "quantidade_maquina",
    "percentual_erro",
)


class StoreError(Exception):
    """Falha ao gravar ou ler registros (conexão, restrição, resposta inválida)"""
    pass


class RecordStore:
    """Interface do armazenamento de registros"""

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def list_all(self) -> List[Dict[str, Any]]:
        """Todos os registros, do mais recente para o mais antigo."""
        raise NotImplementedError


def _etiqueta_to_dict(etiqueta: Etiqueta) -> Dict[str, Any]:
    return {
        "id": etiqueta.id,
        "op": etiqueta.op,
        "carimbadeira": etiqueta.carimbadeira,
        "componente": etiqueta.componente,
        "quantidade_etiqueta": etiqueta.quantidade_etiqueta,
        "quantidade_maquina": etiqueta.quantidade_maquina,
        "percentual_erro": etiqueta.percentual_erro,
        "created_at": etiqueta.created_at,
    }


class SqlAlchemyRecordStore(RecordStore):
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        db = self.session_factory()
        try:
            etiqueta = Etiqueta(**{k: record.get(k) for k in RECORD_FIELDS})
            db.add(etiqueta)
            db.commit()
            db.refresh(etiqueta)
            return _etiqueta_to_dict(etiqueta)
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Erro ao gravar registro: {e}") from e
        finally:
            db.close()

    def list_all(self) -> List[Dict[str, Any]]:
        db = self.session_factory()
        try:
            etiquetas = db.query(Etiqueta).order_by(
                Etiqueta.created_at.desc(),
                Etiqueta.id.desc()
            ).all()
            return [_etiqueta_to_dict(e) for e in etiquetas]
        except SQLAlchemyError as e:
            raise StoreError(f"Erro ao buscar registros: {e}") from e
        finally:
            db.close()


class SupabaseRecordStore(RecordStore):
    def __init__(
        self,
        url: str,
        key: str,
        table: str = "etiquetas",
        timeout: int = 10,
        client: Optional[httpx.Client] = None,
    ):
        if not url or not key:
            raise StoreError("SUPABASE_URL e SUPABASE_KEY devem estar configurados")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        self.client = client or httpx.Client(timeout=timeout)

    def _request(self, method: str, extra_headers: Optional[Dict[str, str]] = None, **kwargs) -> Any:
        headers = {**self.headers, **(extra_headers or {})}
        try:
            response = self.client.request(method, self.endpoint, headers=headers, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Supabase respondeu {e.response.status_code}: {e.response.text}")
            raise StoreError(f"Supabase respondeu {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise StoreError(f"Erro de conexão com o Supabase: {e}") from e
        except ValueError as e:
            raise StoreError("Resposta inválida do Supabase") from e

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        payload = [{k: record.get(k) for k in RECORD_FIELDS}]
        data = self._request(
            "POST",
            extra_headers={"Prefer": "return=representation"},
            json=payload,
        )
        if not data:
            raise StoreError("Supabase não retornou o registro criado")
        return data[0]

    def list_all(self) -> List[Dict[str, Any]]:
        return self._request(
            "GET",
            params={"select": "*", "order": "created_at.desc,id.desc"},
        )


def build_record_store() -> RecordStore:
    """Cria o armazenamento configurado em RECORD_STORE."""
    if settings.RECORD_STORE == "supabase":
        logger.info("Using Supabase record store")
        return SupabaseRecordStore(
            url=settings.SUPABASE_URL,
            key=settings.SUPABASE_KEY,
            table=settings.SUPABASE_TABLE,
            timeout=settings.SUPABASE_TIMEOUT,
        )

    logger.info("Using database record store")
    return SqlAlchemyRecordStore(SessionLocal)
