import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./calendar_scheduler.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Candidate generation
DEFAULT_STEP_MINUTES = int(os.getenv("DEFAULT_STEP_MINUTES", "15"))
DEFAULT_HORIZON_DAYS = int(os.getenv("DEFAULT_HORIZON_DAYS", "14"))
DEFAULT_PRIORITY = int(os.getenv("DEFAULT_PRIORITY", "3"))

# Scoring (weights are renormalized by the scorer, they don't have to sum to 1 here)
WEIGHT_CONSTRAINTS = float(os.getenv("WEIGHT_CONSTRAINTS", "0.40"))
WEIGHT_ENERGY = float(os.getenv("WEIGHT_ENERGY", "0.25"))
WEIGHT_TIMING = float(os.getenv("WEIGHT_TIMING", "0.20"))
WEIGHT_BALANCE = float(os.getenv("WEIGHT_BALANCE", "0.15"))
TIMING_DECAY = float(os.getenv("TIMING_DECAY", "0.95"))
