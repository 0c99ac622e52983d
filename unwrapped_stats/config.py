"""Application configuration and environment settings"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Storage
    DATABASE_URL: str = Field("sqlite:///unwrapped_stats.db", description="SQLAlchemy URL of the local cache database")
    SNAPSHOT_KEY: str = Field("spotify_data_analysis", description="Storage key of the cached summary snapshot")
    CURRENCY_KEY: str = Field("spotify_currency", description="Storage key of the currency preference")
    ALBUMS_LIMIT_KEY: str = Field("spotify_albums_limit", description="Storage key of the albums display limit")

    # Presentation defaults
    DEFAULT_CURRENCY: str = Field("GBP", description="Currency used when no preference is stored (GBP or USD)")
    ALBUMS_LIMIT: int = Field(10, description="Number of albums shown when no preference is stored")
    TOP_ARTISTS_LIMIT: int = Field(10, description="Number of artists in rankings and yearly series")
    ALBUM_PURCHASE_THRESHOLD: int = Field(5, description="Minimum album plays for the purchase alternative")

    # Processing
    PROGRESS_INTERVAL: int = Field(1000, description="Records between progress callbacks")

    # Input/Output directories with defaults
    INPUT_DIR: str = Field("/input", description="Directory containing streaming history exports")
    OUTPUT_DIR: str = Field("/output", description="Directory for output files")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True
    )

settings = Settings()
