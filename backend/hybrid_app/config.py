from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "Hybrid Power Sizing"
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Logging
    log_json: bool = False
    log_level: str = "INFO"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Rate limits (requests per window, per client IP)
    calculation_rate_limit: int = 20
    report_rate_limit: int = 5
    rate_limit_window_seconds: int = 60


settings = Settings()
