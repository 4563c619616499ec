from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import logging
from sqlalchemy import text
from app.config import settings
from app.database import engine, init_db
from app.routers import etiquetas
from app.services.etiqueta_service import build_panel

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RECORD_STORE == "database":
        init_db()
    app.state.panel = build_panel()
    logger.info(f"Indicador Carimbadeira started (store={settings.RECORD_STORE})")
    yield


app = FastAPI(
    title="Indicador Carimbadeira API",
    description="Registro de lotes e indicadores de erro das carimbadeiras",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Erros de leitura do corpo seguem o mesmo formato dos erros do formulário
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    erros = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field = loc[1] if len(loc) > 1 and loc[0] == "body" else (loc[-1] if loc else "body")
        erros.setdefault(field, error.get("msg", "Valor inválido"))

    body = exc.body if isinstance(exc.body, dict) else None
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({
            "mensagem": "Verifique os campos do formulário.",
            "erros": erros,
            "formulario": body,
        })
    )


# Incluir routers
app.include_router(etiquetas.router, prefix=settings.API_V1_PREFIX, tags=["etiquetas"])


@app.get("/")
async def root():
    return {"message": "Indicador Carimbadeira API está funcionando!"}


@app.get("/health")
async def health():
    """Health check básico"""
    return {"status": "healthy"}


@app.get("/health/db")
async def health_db():
    """
    Health check específico para o banco de dados.
    Verifica conexão e executa query simples.
    """
    if settings.RECORD_STORE != "database":
        return {
            "status": "not_configured",
            "service": "database",
            "message": f"Records stored in {settings.RECORD_STORE}"
        }

    try:
        with engine.connect() as conn:
            result = conn.execute(text("SELECT 1 as health_check"))
            row = result.fetchone()

            if row and row[0] == 1:
                return {
                    "status": "healthy",
                    "service": "database",
                    "message": "Database connection successful"
                }
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "database",
                    "message": "Database query failed"
                }
            )
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "database",
                "error": str(e)
            }
        )
