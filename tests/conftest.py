"""
Configuração comum dos testes: SQLite local como banco de dados
"""
import os

# Precisa estar definido antes de importar app.config
os.environ["DATABASE_URL"] = "sqlite:///./test_etiquetas.db"
os.environ["RECORD_STORE"] = "database"

import pytest
from app.database import Base, SessionLocal, engine
import app.models  # noqa: F401


@pytest.fixture(scope="function")
def db_session():
    """Cria as tabelas e uma sessão de banco de dados para testes"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
