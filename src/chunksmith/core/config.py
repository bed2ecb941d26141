from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Tokenization
    CHUNK_TOKENIZER: str = "tiktoken"  # tiktoken|whitespace
    TIKTOKEN_ENCODING: str = "cl100k_base"
    TIKTOKEN_MODEL: Optional[str] = None  # overrides encoding when set

    # Chunking defaults (used by the CLI and StructuredDocument callers)
    CHUNK_STRATEGY: str = "auto"
    CHUNK_MAX_TOKENS: int = Field(
        default=300,
        description="Token budget applied when a caller does not pass one",
    )

    # Observability
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: str = "info"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env precedence."""
        config_data: Dict[str, Any] = {}

        config_path: Optional[Path]
        if config_file:
            config_path = Path(config_file)
        else:
            # Auto-discover .chunksmith.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".chunksmith.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables win over file values
        env_settings = cls()
        for key in env_settings.model_fields_set:
            config_data.pop(key, None)
        return cls(**config_data)


# Default settings - replaced by load_config() during CLI startup
SETTINGS = Settings()
