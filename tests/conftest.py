from pathlib import Path

import pytest

PLANS_HEADER = "plan_id,state,metal_level,rate,rate_area"
ZIPS_HEADER = "zipcode,state,county_code,name,rate_area"
SLCSP_HEADER = "zipcode,rate"


@pytest.fixture
def write_csv(tmp_path):
    """Write a header plus raw lines to tmp_path/<name> and return the path."""
    def _write(name: str, header: str, lines: list[str]) -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_inputs(write_csv):
    """
    Small world:
      64148 -> MO/3, Silver {245.20, 253.65, 245.20}      -> 253.65
      67118 -> KS/6 and KS/7, Silver {8.00} + {8.00, 15.00} -> 15.00
      40813 -> KY/2, one Silver price point               -> blank
      54923 -> no zip row                                  -> blank
      07094 -> NJ/1, Silver {200, 212.5}                   -> 212.50
    """
    plans = write_csv("plans.csv", PLANS_HEADER, [
        "74449NR9870320,MO,Silver,245.20,3",
        "26325VH2723968,MO,Silver,253.65,3",
        "11111AA1111111,MO,Silver,245.20,3",
        "22222BB2222222,MO,Gold,100.00,3",
        "33333CC3333333,MO,silver,1.00,3",
        "44444DD4444444,KS,Silver,8.00,6",
        "55555EE5555555,KS,Silver,8.00,7",
        "66666FF6666666,KS,Silver,15.00,7",
        "77777GG7777777,KY,Silver,300.00,2",
        "88888HH8888888,KY,Silver,300.00,2",
        "99999II9999999,NJ,Silver,200,1",
        "10101JJ1010101,NJ,Silver,212.5,1",
        "12121KK1212121,NJ,Bronze,150.00,1",
        "13131LL1313131,MO,Silver,1.00,4",
    ])
    zips = write_csv("zips.csv", ZIPS_HEADER, [
        "64148,MO,29095,Jackson,3",
        "67118,KS,20015,Butler,6",
        "67118,KS,20191,Sumner,7",
        "40813,KY,21013,Bell,2",
        "07094,NJ,34017,Hudson,1",
        "",
    ])
    slcsp = write_csv("slcsp.csv", SLCSP_HEADER, [
        "64148,",
        "67118,",
        "40813,",
        "",
        "54923,",
        "07094,",
        "64148,",
    ])
    return {"plans": plans, "zips": zips, "slcsp": slcsp}
