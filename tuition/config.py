from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    app_name: str = 'Tuition Center Manager'
    app_env: str = 'local'
    app_timezone: str = 'Asia/Kolkata'
    database_url: str = 'sqlite:///./tuition.db'
    center_name: str = 'Ajmal Akeel Tuition Center'
    center_name_ta: str = 'அஜ்மல் அகீல் பயிற்சி மையம்'
    currency_symbol: str = '₹'
    whatsapp_base_url: str = 'https://wa.me'
    ai_helper_url: str = ''
    ai_helper_api_key: str = ''
    ai_helper_timeout_seconds: float = 30.0
    store_retry_attempts: int = 3
    store_retry_base_seconds: float = 0.2
    remark_leaderboard_size: int = 6
    db_slow_query_ms: int = 100
    metrics_slow_ms: int = 200


settings = Settings()
