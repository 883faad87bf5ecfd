"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class FetchSettings(BaseSettings):
    """Fetch configuration."""

    timeout: float = 10.0
    max_redirects: int = 10
    max_connections: int = 100
    max_keepalive_connections: int = 20
    user_agent: str = "anyfetch/0.1"
    enable_script_scheme: bool = True

    model_config = {"env_prefix": "ANYFETCH_"}


settings = FetchSettings()
