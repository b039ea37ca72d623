"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Panadería API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Backend de la tienda de la panadería: catálogo, usuarios y pedidos"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: Optional[str] = None
    DB_POOL_MIN_CONN: int = 1
    DB_POOL_MAX_CONN: int = 10
    DB_CONNECT_RETRIES: int = 3
    DB_RETRY_DELAY: float = 1.0
    # Max wait for a row locked by a competing order (0 = wait forever)
    DB_LOCK_TIMEOUT_MS: int = 5000

    # Auth (tokens JWT en lugar de cookie de sesión)
    AUTH_SECRET: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Pedidos: si es False, nombre y precio se toman del catálogo al reservar
    TRUST_CLIENT_PRICES: bool = True

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
