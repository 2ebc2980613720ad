from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Literal, Optional
from pydantic import field_validator
from urllib.parse import urlparse, urlencode, urlunparse, parse_qsl


class Settings(BaseSettings):
    app_env: str = "development"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./database.sqlite3"

    cors_origins: List[str] = ["http://localhost:3000"]
    cors_origin_regex: Optional[str] = None

    # Deposit guard: accept only while outstanding >= (deposit + balance) * ratio
    deposit_cap_ratio: float = Field(default=1.25, gt=0)
    # "client_or_contractor" counts jobs on either side of the target's contracts
    deposit_outstanding_scope: Literal["client_or_contractor", "client"] = "client_or_contractor"
    allow_deposit_to_other_profiles: bool = True

    best_clients_default_limit: int = Field(default=2, ge=1)
    seed_on_startup: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors(cls, v):
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def ensure_ssl(cls, v: str) -> str:
        raw = str(v)
        parsed = urlparse(raw)
        scheme = parsed.scheme
        # sqlite and already-qualified drivers are left alone
        if scheme not in ("postgres", "postgresql", "postgresql+psycopg"):
            return raw
        scheme = "postgresql+psycopg"
        host = (parsed.hostname or "").lower()
        q = dict(parse_qsl(parsed.query, keep_blank_values=True))
        # Treat common internal/docker hosts as non-SSL
        internal = host in {"localhost", "127.0.0.1", "db"} or host.endswith(".internal") or "." not in host
        if not internal and not any(k.lower() == "sslmode" for k in q.keys()):
            q["sslmode"] = "require"
        return urlunparse((
            scheme,
            parsed.netloc,
            parsed.path,
            parsed.params,
            urlencode(q),
            parsed.fragment,
        ))


settings = Settings()


def get_settings() -> Settings:
    return settings
