from pathlib import Path

from pydantic_settings import BaseSettings

APP_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = APP_DIR / "templates"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./dinner.db"

    # Shared household PIN. pin_hash (bcrypt) wins when both are set.
    pin: str = ""
    pin_hash: str = ""

    # Auth settings
    session_cookie_name: str = "session"
    session_max_age: int = 60 * 60 * 24 * 14  # 2 weeks
    session_cookie_secure: bool = False  # True in production

    # Meal photo storage
    photo_dir: str = "uploads/meal-photos"
    photo_max_width: int = 1920

    # Reject browsers that don't ask for en-GB
    require_english_locale: bool = False

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
