import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

OUTPUT_MODES = ("plain", "json", "rich")


@dataclass
class Settings:
    # Database
    default_db_file: str = os.getenv("DIARY_DB_FILE", "diary.db")

    # Console output: plain | json | rich
    output_mode: str = os.getenv("DIARY_OUTPUT", "plain").lower()

    # Logging
    log_level: str = os.getenv("DIARY_LOG_LEVEL", "WARNING").upper()


settings = Settings()
