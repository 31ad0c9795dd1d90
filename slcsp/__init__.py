"""Second lowest cost Silver plan (SLCSP) rates per zip code."""

from .main import run
from .schemas import Plan, Result, TargetZip, ZipArea
