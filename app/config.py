from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./etiquetas.db"

    # API
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Armazenamento dos registros: database | supabase
    RECORD_STORE: str = "database"

    # Supabase (PostgREST)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_TABLE: str = "etiquetas"
    SUPABASE_TIMEOUT: int = 10

    # Formato da OP: separado (000.000/00.00) | digitos (somente números)
    OP_FORMAT: str = "separado"
    OP_MAX_DIGITS: int = 10

    # Carimbadeiras e componentes conhecidos (ordem de exibição)
    CARIMBADEIRAS: list[str] = ["C01", "C02", "C03", "C04", "C05"]
    COMPONENTES: list[str] = ["Aba", "Válvula", "Fundo", "Tampa"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


settings = Settings()
