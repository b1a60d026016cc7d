
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"true", "1", "yes"}


# project paths
BASE_DIR    = Path(__file__).resolve().parent.parent.parent.parent
DATA_DIR    = BASE_DIR / "data"
PARTIAL_DIR = Path(os.getenv("SRAG_PARTIAL_DIR", DATA_DIR / "partial"))
LOGS_DIR    = DATA_DIR / "logs"

# logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE  = os.getenv("LOG_FILE", "seed.log")

# ingestion
USE_FULL_DATA  = _env_flag("USE_FULL_DATA")
BATCH_SIZE     = int(os.getenv("BATCH_SIZE", "100"))
REMOTE_TIMEOUT = int(os.getenv("REMOTE_TIMEOUT", "60"))
CSV_ENCODING   = os.getenv("CSV_ENCODING", "utf-8")
CSV_SEPARATOR  = ";"

# continue | abort; empty means the default of the chosen mode
ON_ERROR = os.getenv("ON_ERROR", "").strip().lower() or None

# OpenDataSUS yearly SRAG extracts
REMOTE_CSV_URLS = {
    2019: "https://s3.sa-east-1.amazonaws.com/ckan.saude.gov.br/SRAG/2019/INFLUD19-26-06-2025.csv",
    2020: "https://s3.sa-east-1.amazonaws.com/ckan.saude.gov.br/SRAG/2020/INFLUD20-26-06-2025.csv",
    2021: "https://s3.sa-east-1.amazonaws.com/ckan.saude.gov.br/SRAG/2021/INFLUD21-26-06-2025.csv",
    2022: "https://s3.sa-east-1.amazonaws.com/ckan.saude.gov.br/SRAG/2022/INFLUD22-26-06-2025.csv",
    2023: "https://s3.sa-east-1.amazonaws.com/ckan.saude.gov.br/SRAG/2023/INFLUD23-26-06-2025.csv",
    2024: "https://s3.sa-east-1.amazonaws.com/ckan.saude.gov.br/SRAG/2024/INFLUD24-26-06-2025.csv",
}

# Database
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")

if os.getenv("DATABASE_URL"):
    DATABASE_URL = os.getenv("DATABASE_URL")
elif all([DB_USER, DB_PASSWORD, DB_NAME]):
    DATABASE_URL = f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
else:
    DATABASE_URL = None
