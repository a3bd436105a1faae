from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # DB URL (환경변수: DATABASE_URL)
    database_url: Optional[str] = Field(
        default="sqlite:///./dev.db",
        validation_alias="DATABASE_URL",
    )
    # 기본 설정들
    environment: str = Field(default="local")
    secret_key: str = Field(default="CHANGE_ME_SECRET")
    access_token_exp_minutes: int = Field(default=1440)  # 24시간
    refresh_token_exp_days: int = Field(default=14)
    jwt_algorithm: str = Field(default="HS256")
    log_level: str = Field(default="INFO")

    # 네이버 책 검색 API (요청 입력이 아닌 환경변수로만 주입)
    naver_api_client_id: Optional[str] = Field(
        default=None,
        validation_alias="NAVER_API_CLIENT_ID",
    )
    naver_api_client_secret: Optional[str] = Field(
        default=None,
        validation_alias="NAVER_API_CLIENT_SECRET",
    )
    naver_api_base_url: str = Field(default="https://openapi.naver.com/v1/search")
    naver_timeout_seconds: float = Field(default=10.0)

    # 카테고리 정보가 없는 책이 들어갈 기본 카테고리
    default_category_name: str = Field(default="기타")

    # CORS
    cors_origins: str = Field(default="*")  # comma separated list for production

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
