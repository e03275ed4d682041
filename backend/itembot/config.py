import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Item Bot Store API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Persistent store: one blob under `db_key` inside `storage_dir`
    storage_dir: str = os.getenv("STORAGE_DIR", "./data")
    db_key: str = os.getenv("DB_KEY", "item_bot_db")
    # Timezone that defines "today" for the daily quota window
    reference_timezone: str = os.getenv("REFERENCE_TZ", "UTC")

    # Reserved accounts (access codes are plaintext lookups)
    admin_user_id: int = int(os.getenv("ADMIN_USER_ID", "1337"))
    admin_access_code: str = os.getenv("ADMIN_ACCESS_CODE", "A12")
    admin_full_name: str = os.getenv("ADMIN_FULL_NAME", "Admin")
    demo_access_code: str = os.getenv("DEMO_ACCESS_CODE", "N1")
    demo_full_name: str = os.getenv("DEMO_FULL_NAME", "Demo User")
    demo_about: str = os.getenv("DEMO_ABOUT", "This is a demo account.")

    # Gemini API Settings (story/caption/chat/image generation)
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    gemini_api_base: str = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
    gemini_text_model: str = os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash")
    gemini_image_model: str = os.getenv("GEMINI_IMAGE_MODEL", "imagen-4.0-generate-001")
    gemini_edit_model: str = os.getenv("GEMINI_EDIT_MODEL", "gemini-2.5-flash-image-preview")

    # Daily algorithm-news article cache (side key next to the store blob)
    news_cache_key: str = os.getenv("NEWS_CACHE_KEY", "instagram_algorithm_news")

settings = Settings()  # Instantiate configuration
