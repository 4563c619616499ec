"""
Módulo de database: conexão com PostgreSQL (ou SQLite local)
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite é usado em desenvolvimento e nos testes
    connect_args["check_same_thread"] = False

# Criar engine do SQLAlchemy usando DATABASE_URL do .env
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    connect_args=connect_args,
)

# Criar SessionLocal
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para os models
Base = declarative_base()


# Dependency para obter a sessão do banco
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Cria as tabelas que ainda não existem."""
    # Importa os models para registrá-los no metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = ['get_db', 'init_db', 'Base', 'SessionLocal', 'engine']
