"""
Médias do percentual de erro sobre a lista completa de registros.
Recalculadas inteiras a cada nova leitura, sem atualização incremental.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence


def _get(record: Any, key: str) -> Any:
    if isinstance(record, dict):
        return record.get(key)
    return getattr(record, key, None)


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def overall_mean(records: Iterable[Any]) -> float:
    """Média geral do percentual_erro; 0.0 quando não há registros."""
    return _mean([float(_get(r, "percentual_erro")) for r in records])


def mean_by_group(records: Iterable[Any], group_key: str, known_values: Sequence[str]) -> Dict[str, float]:
    """
    Média do percentual_erro para cada valor de known_values, na ordem
    declarada. Valores sem registros aparecem com 0.0; valores fora da
    lista são ignorados.
    """
    records = list(records)
    return {
        value: _mean([
            float(_get(r, "percentual_erro"))
            for r in records
            if _get(r, group_key) == value
        ])
        for value in known_values
    }


@dataclass(frozen=True)
class Summary:
    total_registros: int
    media_geral: float
    media_por_carimbadeira: Dict[str, float] = field(default_factory=dict)
    media_por_componente: Dict[str, float] = field(default_factory=dict)


def summarize(records: Sequence[Any], carimbadeiras: Sequence[str], componentes: Sequence[str]) -> Summary:
    return Summary(
        total_registros=len(records),
        media_geral=overall_mean(records),
        media_por_carimbadeira=mean_by_group(records, "carimbadeira", carimbadeiras),
        media_por_componente=mean_by_group(records, "componente", componentes),
    )
