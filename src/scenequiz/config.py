import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings:
    PROJECT_NAME: str = "scenequiz"
    DEBUG: bool = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "scenequiz.log"
    SCENES_DIR: str = os.environ.get("SCENES_DIR", os.path.join(BASE_DIR, "scenes"))
    TEMPLATES_DIR: str = os.path.join(BASE_DIR, "templates")
    STATIC_DIR: str = os.path.join(BASE_DIR, "static")
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY") or os.environ.get(
        "GOOGLE_API_KEY", ""
    )
    IMAGE_MODEL: str = os.environ.get("IMAGE_MODEL", "gemini-2.5-flash-image")
    TEXT_MODEL: str = os.environ.get("TEXT_MODEL", "gemini-2.5-flash")
    REQUEST_TIMEOUT_SECONDS: float = float(
        os.environ.get("REQUEST_TIMEOUT_SECONDS", "120")
    )
    SESSION_COOKIE_NAME: str = "scenequiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
