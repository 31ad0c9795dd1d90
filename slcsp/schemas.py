from decimal import Decimal
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Plans are priced uniformly within one (state, rate_area) pair
AreaKey = Tuple[str, int]

SILVER = "Silver"

# Upper bound keeps cent rounding inside the default decimal context precision
MAX_RATE = Decimal("1e15")


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    plan_id: str
    state: str
    metal_level: str
    rate: Decimal = Field(ge=0, lt=MAX_RATE)
    rate_area: int = Field(gt=0)

    @property
    def area_key(self) -> AreaKey:
        return (self.state, self.rate_area)


class ZipArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    zipcode: str
    state: str
    county_code: str
    name: str
    rate_area: int = Field(gt=0)

    @property
    def area_key(self) -> AreaKey:
        return (self.state, self.rate_area)


class TargetZip(BaseModel):
    model_config = ConfigDict(frozen=True)

    zipcode: str


class Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    zipcode: str
    rate: Optional[Decimal] = None   # None means unresolvable
