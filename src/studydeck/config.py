from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_path: Path = Path.home() / ".studydeck" / "studydeck.db"
    queue_order: str = "shuffle"  # see selection.QUEUE_ORDERS
    shuffle_seed: int | None = None
    log_level: str = "WARNING"

    model_config = {"env_prefix": "STUDYDECK_"}


settings = Settings()
