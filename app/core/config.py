from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "uml2code"
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    database_url: str = "sqlite:///./uml2code.db"

    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    llm_temperature: float = 0.7
    llm_max_output_tokens: int = 8192
    llm_timeout_seconds: float = 120.0

    output_dir: str = "/data/generated"
    keep_output: bool = False
    project_name: str = "MyGeneratedProject"

settings = Settings()
