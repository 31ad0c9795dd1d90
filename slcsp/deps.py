import os
from pathlib import Path
from sqlalchemy import create_engine

ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.environ.get("SLCSP_DATA_DIR", ROOT / "data"))

PLANS_PATH = DATA_DIR / "plans.csv"
ZIPS_PATH = DATA_DIR / "zips.csv"
SLCSP_PATH = DATA_DIR / "slcsp.csv"
OUTPUT_PATH = DATA_DIR / "slcsp_out.csv"
SCRATCH_DB_PATH = DATA_DIR / "scratch.sqlite"

def get_engine(path: Path):
    # One file, one connection: the store is scratch space for a single run
    return create_engine(f"sqlite:///{path}")
