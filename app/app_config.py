from pydantic import BaseModel

from app.shared.config import config


def _str(key: str, default: str = "") -> str:
    return (config.get(key) or default).strip()


def _int(key: str, default: int) -> int:
    return int((config.get(key) or "").strip() or default)


class AppEnvironConfig(BaseModel):
    # Deployment environment: "production" switches the player host
    APP_ENV: str = _str("APP_ENV", "development").lower()

    # Player URLs
    PLAYER_BASE_URL_PRODUCTION: str = _str("PLAYER_BASE_URL_PRODUCTION", "https://player.example.com:3001")
    PLAYER_BASE_URL_DEVELOPMENT: str = _str("PLAYER_BASE_URL_DEVELOPMENT", "http://localhost:3001")
    PLAYER_IFRAME_PATH: str = _str("PLAYER_IFRAME_PATH", "/api/player-port/iframe")
    DIRECT_STREAM_BASE_URL: str = _str("DIRECT_STREAM_BASE_URL", "https://stream.example.com:1935")

    # Streaming control service (encoder process control)
    STREAMING_CONTROL_BASE_URL: str = _str("STREAMING_CONTROL_BASE_URL", "http://localhost:3100")
    STREAMING_CONTROL_API_KEY: str | None = _str("STREAMING_CONTROL_API_KEY") or None
    STREAMING_CONTROL_TIMEOUT_SECONDS: int = _int("STREAMING_CONTROL_TIMEOUT_SECONDS", 30)

    # Manifest (SMIL) service
    MANIFEST_SERVICE_BASE_URL: str = _str("MANIFEST_SERVICE_BASE_URL", "http://localhost:3200")
    MANIFEST_SERVICE_API_KEY: str | None = _str("MANIFEST_SERVICE_API_KEY") or None
    MANIFEST_SERVICE_TIMEOUT_SECONDS: int = _int("MANIFEST_SERVICE_TIMEOUT_SECONDS", 10)
    DEFAULT_SERVER_ID: int = _int("DEFAULT_SERVER_ID", 1)

    # Per-owner transmission slot lock
    TRANSMISSION_LOCK_TTL_SECONDS: int = _int("TRANSMISSION_LOCK_TTL_SECONDS", 30)
    TRANSMISSION_LOCK_WAIT_SECONDS: int = _int("TRANSMISSION_LOCK_WAIT_SECONDS", 10)

    # Caller token verification
    JWT_SECRET: str = _str("JWT_SECRET", "dev-secret")
    JWT_ALGORITHM: str = _str("JWT_ALGORITHM", "HS256")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def player_base_url(self) -> str:
        if self.is_production:
            return self.PLAYER_BASE_URL_PRODUCTION
        return self.PLAYER_BASE_URL_DEVELOPMENT


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
