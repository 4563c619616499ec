"""
Script para popular o armazenamento com registros de exemplo das carimbadeiras.

Uso:
    python -m app.scripts.seed_data [quantidade]
"""
import logging
import random
import sys

from app.config import settings
from app.database import init_db
from app.services.etiqueta_service import build_panel

logger = logging.getLogger(__name__)

DEFAULT_RECORDS = 30


def random_form() -> dict:
    """Gera um formulário como o operador digitaria."""
    expected = random.choice([500, 1000, 1500, 2000, 2500])
    # Máquina conta entre 5% a menos e 3% a mais
    actual = int(expected * random.uniform(0.95, 1.03))
    return {
        "op": str(random.randint(100000000, 9999999999)),
        "carimbadeira": random.choice(settings.CARIMBADEIRAS),
        "componente": random.choice(settings.COMPONENTES),
        "quantidade_etiqueta": str(expected),
        "quantidade_maquina": str(actual),
    }


def seed(total: int = DEFAULT_RECORDS) -> int:
    if settings.RECORD_STORE == "database":
        init_db()

    panel = build_panel()
    created = 0
    for _ in range(total):
        panel.submit(random_form())
        created += 1

    summary = panel.summary()
    logger.info(f"{created} registros criados; média geral {summary.media_geral:.2f}%")
    return created


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    total = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_RECORDS
    seed(total)


if __name__ == "__main__":
    main()
