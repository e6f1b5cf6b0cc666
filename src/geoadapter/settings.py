import os

from dotenv import load_dotenv

load_dotenv()

HOST = os.getenv("GEOADAPTER_HOST", "0.0.0.0")
PORT = int(os.getenv("GEOADAPTER_PORT") or 8000)
LOG_LEVEL = os.getenv("GEOADAPTER_LOG_LEVEL", "INFO")

# Worker count for ordered batch conversion; unset lets the executor choose.
MAX_WORKERS = int(os.getenv("GEOADAPTER_MAX_WORKERS") or 0) or None
