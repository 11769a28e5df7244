from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    db_path: str = os.getenv("NEONCGPA_DB_PATH", "data/neoncgpa.db")
    storage_key: str = os.getenv("NEONCGPA_STORAGE_KEY", "cgpa_neon_v1")
    legacy_storage_keys: tuple[str, ...] = _split_csv(os.getenv("NEONCGPA_LEGACY_KEYS", "cgpa_v2_data"))
    export_filename: str = os.getenv("NEONCGPA_EXPORT_FILENAME", "neon_cgpa_backup.json")

    log_level: str = os.getenv("NEONCGPA_LOG_LEVEL", "INFO").upper()


settings = Settings()
