import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

PACKAGE_DIR = Path(__file__).parent

SUBWAY_MAP_DEFAULT = os.getenv("SUBWAY_MAP_DEFAULT", "wmap")

STATUS_TICK_INTERVAL_MS = int(os.getenv("STATUS_TICK_INTERVAL_MS", "3000"))
STATUS_CHANGE_PROBABILITY = float(os.getenv("STATUS_CHANGE_PROBABILITY", "0.2"))
# Unset -> nondeterministic statuses
STATUS_RANDOM_SEED = os.getenv("STATUS_RANDOM_SEED") or None

CLUSTER_PADDING = float(os.getenv("CLUSTER_PADDING", "50"))

SERVICES_FIXTURE_PATH = Path(
    os.getenv(
        "SERVICES_FIXTURE_PATH",
        str(PACKAGE_DIR / "catalog" / "fixtures" / "subway-map-services.json"),
    )
)

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
