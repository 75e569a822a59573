from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "Resume AI API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # AI/LLM Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_max_output_tokens: int = 8192

    # Sampling temperature per call type
    generation_temperature: float = 0.7
    match_temperature: float = 0.3
    rewrite_temperature: float = 0.3
    ats_temperature: float = 0.2
    instruction_temperature: float = 0.4

    # Request limits
    max_job_description_chars: int = 10_000
    max_instruction_chars: int = 2_000

    # Reject stage-2 replies whose work experience count differs from the input
    enforce_experience_parity: bool = False

    # HTTP client (ResumeApiClient)
    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: float = 120.0

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
