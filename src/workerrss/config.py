"""应用配置管理."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """应用配置（环境变量）."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 抓取配置
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_seconds: float = 30.0

    # 后处理配置
    full_text_delay_ms: int = 200  # 全文抓取请求间隔
    translation_concurrency: int = 3

    # 聚合配置
    folder_max_items: int = 50

    # 缓存时长（由 HTTP 层写入 Cache-Control）
    cache_success_seconds: int = 28800
    cache_error_seconds: int = 600

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """获取应用配置（带缓存）."""
    return Settings()
