from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Golf Playgroups API"
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATA_DIR: str = "data"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""
    DEFAULT_COURSE_NAME: str = "Default Course"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
