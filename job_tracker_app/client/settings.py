from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Settings for the command-line client, read from JOBTRACKER_* variables."""

    api_url: str = "http://localhost:8000"
    token_file: Path = Path.home() / ".jobtracker" / "token"
    request_timeout: float = 10.0

    model_config = {
        "env_prefix": "JOBTRACKER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache()
def get_client_settings() -> ClientSettings:
    return ClientSettings()
