from pathlib import Path
from typing import List, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Travel Hold Quota Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'travel_hold_db'
    POSTGRES_PORT: int = 5432

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a connection
    DB_POOL_RECYCLE: int = 3600  # recycle connections after 1 hour
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Hold quota engine
    HOLD_STORE_BACKEND: Literal['postgres', 'memory'] = 'postgres'
    DEFAULT_HOLD_EXPIRY_MINUTES: int = 30
    DEFAULT_HOLD_QUOTA_PERCENTAGE: float = 25.0
    MIN_HOLD_EXPIRY_MINUTES: int = 5  # floor enforced on partner policy updates

    # Expiry sweeper
    ENABLE_HOLD_SWEEPER: bool = True
    HOLD_SWEEP_INTERVAL_SECONDS: float = 300.0
    HOLD_SWEEP_BATCH_SIZE: int = 500
    HOLD_SWEEP_MAX_RETRIES: int = 3  # per-hold retries on infrastructure failure
    HOLD_SWEEP_RETRY_BASE_DELAY_SECONDS: float = 0.5

    # Partner policy cache: upper bound on how stale an admin change can be
    PARTNER_POLICY_CACHE_TTL_SECONDS: float = 30.0

    @field_validator('DEFAULT_HOLD_QUOTA_PERCENTAGE')
    @classmethod
    def validate_default_quota_percentage(cls, v: float) -> float:
        if not 0 <= v <= 100:
            raise ValueError('DEFAULT_HOLD_QUOTA_PERCENTAGE must be between 0 and 100')
        return v

    @field_validator('DEFAULT_HOLD_EXPIRY_MINUTES', 'MIN_HOLD_EXPIRY_MINUTES')
    @classmethod
    def validate_positive_minutes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('hold expiry minutes must be positive')
        return v


settings = Settings()  # type: ignore
