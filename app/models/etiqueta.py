from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from app.database import Base


class Etiqueta(Base):
    __tablename__ = "etiquetas"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    op = Column(String(32), nullable=False, index=True)
    carimbadeira = Column(String(64), nullable=False, index=True)
    componente = Column(String(64), nullable=True, index=True)
    quantidade_etiqueta = Column(Integer, nullable=False)
    quantidade_maquina = Column(Integer, nullable=False)
    # Calculado na submissão a partir das duas quantidades
    percentual_erro = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
