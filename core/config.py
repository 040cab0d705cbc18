from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator



class Settings(BaseSettings):
    database_url: str = Field(..., description="Database connection string (Postgres, or SQLite for local runs)")
    db_pool_size: int = Field(10, description="Database connection pool size", ge=0)
    db_max_overflow: int = Field(20, description="Maximum overflow connections beyond pool_size", ge=0)

    # JWT

    jwt_secret_key: str = Field(..., description="secret key for JWT token signing", min_length=32)
    jwt_algorithm: str = Field("HS256", description="JWT signing algorithm")
    jwt_access_token_expires_minutes: int = Field(60 * 24 * 7, description="Access token expiration time in minutes",
                                                  ge=1, le=60 * 24 * 30)
    bcrypt_rounds: int = Field(12, description="bcrypt cost factor for password hashing", ge=4, le=31)

    # redis
    redis_url: str | None = Field(None, description="Redis connection string for token blacklist and rate limiting")

    # celery
    celery_broker_url: str | None = Field(None, description="Celery message broker URL (usually Redis)")
    celery_result_backend: str | None = Field(None, description="Celery result backend URL")
    celery_task_always_eager: bool = Field(False, description="Run celery tasks inline instead of queueing them")

    # email
    smtp_host: str | None = Field(None, description="SMTP server used for notification emails")
    smtp_port: int = Field(587, description="SMTP server port", ge=1, le=65535)
    smtp_user: str | None = Field(None, description="SMTP username")
    smtp_password: str | None = Field(None, description="SMTP password")
    email_from: str = Field("noreply@projects.local", description="Sender address for notification emails")

    #rate limiting
    rate_limit_per_minute: int = Field(100, description="maximum requests per minute per user", ge= 1)

    #app settings
    environment: str = Field("development", description="Application environment (development, staging, production)")
    debug: bool = Field(True, description="Enable debug mode (should be False in production)" )
    project_name : str = Field("Project Management API", description="Project name (shown in OpenAPI docs)")
    api_v1_prefix: str = Field("/api/v1", description= "API version 1 route prefix")

    #CORS config
    cors_origins: str = Field("http://localhost:3000,http://localhost:5173", description="Comma-separated list of allowed CORS origins")

    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    @field_validator('database_url')
    def validate_database_url(cls, v):
        #Ensure database URL uses a supported driver
        allowed = ('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')
        if not v.startswith(allowed):
            raise ValueError(f'DATABASE_URL must start with one of: {", ".join(allowed)}')
        return v

    @field_validator('environment')
    def validate_environment(cls, v):
        #Ensure environment is one of the allowed values
        allowed = ['development', 'staging', 'production']
        if v.lower() not in allowed:
            raise ValueError(f'ENVIRONMENT must be one of: {", ".join(allowed)}')
        return v.lower()

    @field_validator('log_level')
    def validate_log_level(cls, v):
        #ensure log level is valid
        allowed = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f'LOG_LEVEL must be one of: {", ".join(allowed)}')
        return v_upper


    #helper properties
    @property
    def cors_origins_list(self) -> list[str]:
        #converts comma seperated cors to a list
        return [origin.strip() for origin in self.cors_origins.split(',') if origin.strip()]

    @property
    def is_production(self)-> bool:
        return self.environment == "production"

    @property
    def is_development(self)-> bool:
        return self.environment == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith('sqlite')

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)

    @property
    def database_url_async(self) -> str:

        # Convert sync PostgreSQL URL to async (asyncpg driver).SQLAlchemy 2.0 with async requires asyncpg.

        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return self.database_url



    class Config:
        project_root = Path(__file__).resolve().parent.parent
        env_file = project_root / ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
