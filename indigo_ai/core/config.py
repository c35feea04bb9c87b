# indigo_ai/core/config.py
from typing import Optional, Tuple
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field

from indigo_ai.core.errors import ConfigError

class Settings(BaseSettings):
    # INDIGO API
    # defaults are set but are overridden by .env or the -ip/-port flags
    INDIGO_IP: str = "10.10.0.140"
    INDIGO_PORT: str = "8176"
    HTTP_TIMEOUT: Optional[float] = 10.0

    # AUTHENTICATION
    # "username:password", required at runtime but not at import
    INDIGO_AUTH: str = ""

    # LLM (any OpenAI-compatible chat completion server)
    LLM_BASE_URL: str = "http://10.10.0.129:5001/v1"
    LLM_API_KEY: str = "dummy"
    LLM_MODEL: str = "gpt-3.5-turbo"
    LLM_TEMPERATURE: float = 0.9
    LLM_MAX_TOKENS: int = 1643

    # PROMPT TEMPLATES
    PROMPT_DIR: str = "."
    DEVICE_SELECTION_TEMPLATE: str = "prompt3.txt"
    DESIRED_STATE_TEMPLATE: str = "prompt2.txt"

    # LOGGING
    # 0 for Error, 1 for Info, 2 for Debug
    LOG_VERBOSITY: int = 1

    @computed_field
    def INDIGO_URL(self) -> str:
        return f"http://{self.INDIGO_IP}:{self.INDIGO_PORT}"

    def credentials(self) -> Tuple[str, str]:
        """Split INDIGO_AUTH into (username, password)."""
        if not self.INDIGO_AUTH:
            raise ConfigError("INDIGO_AUTH environment variable not set")
        username, sep, password = self.INDIGO_AUTH.partition(":")
        if not sep or not username:
            raise ConfigError("INDIGO_AUTH must have the form username:password")
        return username, password

    # CONFIGURATION
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

# Instantiate the singleton
try:
    settings = Settings()
except Exception as e:
    print(f"CRITICAL CONFIG ERROR: Invalid environment or .env file.\n{e}")
    raise e
