from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    app_version: str = "1.0.0"
    database_url: str = "sqlite:///./natureestate.db"
    sql_echo: bool = False

    # create_all on startup; migrations own the schema in prod
    auto_create_schema: bool = True

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Auth ----
    jwt_secret: str = "dev-change-me"
    jwt_algorithm: str = "HS256"
    access_token_minutes: int = 60 * 24 * 7  # 7 days
    session_days: int = 7
    password_reset_minutes: int = 60
    pbkdf2_iterations: int = 210_000

    # ---- Links in outgoing (mocked) mail ----
    frontend_url: str = "http://localhost:5173"

    def model_post_init(self, __context) -> None:
        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        if is_prod:
            if self.jwt_secret == "dev-change-me":
                raise ValueError("SECURITY: default jwt_secret is not allowed in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")

            if self.auto_create_schema:
                object.__setattr__(self, "auto_create_schema", False)
