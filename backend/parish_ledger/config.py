from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    database_url: str = "sqlite:///./parish_ledger.db"
    api_prefix: str = "/api"
    app_version: str = "2026-10-18.v1"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Dues engine ----
    dues_payment_type: str = "membership_due"
    # False: surplus and deficit both roll forward (net walk)
    # True: a deficit is dropped at each year end, a surplus still rolls
    dues_carry_floor: bool = False
    counted_statuses: list[str] = ["succeeded"]

    # ---- Roles ----
    staff_roles: list[str] = [
        "admin",
        "treasurer",
        "secretary",
        "church_leadership",
        "bookkeeper",
        "auditor",
        "ar_team",
    ]

    # ---- Auth ----
    auth_mode: str = "dev"  # dev|jwt
    dev_header_user_email: str = "X-User-Email"

    jwt_secret: str = "dev-change-me"
    jwt_cookie_name: str = "parish_jwt"

    def model_post_init(self, __context) -> None:
        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        if is_prod:
            if (self.auth_mode or "").strip().lower() == "dev":
                raise ValueError("SECURITY: auth_mode=dev is not allowed in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
