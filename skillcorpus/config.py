from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Corpus
    corpus_dir: str = "./skills"
    min_content_chars: int = 1000

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    cli_log_level: str = "WARNING"

    # Functional validation
    container_runtime: str = ""  # "docker", "podman", or empty to auto-detect
    container_image: str = "python:3.11-alpine"
    python_executable: str = "python3"
    validation_timeout_s: float = 60.0

    model_config = {
        "env_prefix": "SKILLCORPUS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
