from __future__ import annotations
import pytest
from fastapi.testclient import TestClient
from brewshare_backend.app.main import app
from brewshare_backend.app.schemas import (
    BlendComponent, BrewingNote, CoffeeBean, CoffeeBeanInfo, Method, MethodParams,
    NoteParams, Stage, TasteScores,
)

# --- HTTP client ---
@pytest.fixture(scope="session")
def client():
    return TestClient(app)

# --- Sample records (fresh per test; records are plain values) ---
@pytest.fixture
def sample_method() -> Method:
    return Method(
        id="m-1",
        name="改良分段式一刀流",
        params=MethodParams(
            coffee="15g",
            water="225g",
            ratio="1:15",
            grind_size="中细",
            temp="92°C",
            stages=[
                Stage(time=30, pour_time=15, label="焖蒸", water="45g",
                      detail="绕圈注水，充分润湿粉层", pour_type="circle"),
                Stage(time=60, pour_time=20, label="中心注水", water="120g",
                      detail="", pour_type="center", valve_status="closed"),
                Stage(time=120, pour_time=30, label="加冰", water="225g",
                      detail="静置等待滴滤完成", pour_type="ice", valve_status="open"),
            ],
        ),
    )

@pytest.fixture
def sample_bean() -> CoffeeBean:
    return CoffeeBean(
        id="b-1",
        name="Ethiopia Yirgacheffe",
        roast_level="浅度烘焙",
        roast_date="2024-05-01",
        origin="埃塞俄比亚",
        process="水洗",
        variety="原生种",
        type="单品",
        price="88",
        capacity="200",
        remaining="150",
        flavor=["柑橘", "茉莉花", "蜂蜜"],
        notes="适合手冲",
        start_day=7,
        end_day=30,
    )

@pytest.fixture
def sample_blend() -> CoffeeBean:
    return CoffeeBean(
        name="秋季拼配",
        type="拼配",
        capacity="250",
        blend_components=[
            BlendComponent(name="Sidama", percentage="60", origin="埃塞俄比亚", process="日晒"),
            BlendComponent(percentage="40", origin="哥伦比亚", variety="卡杜拉"),
        ],
    )

@pytest.fixture
def sample_note() -> BrewingNote:
    return BrewingNote(
        id="n-1",
        bean_id="b-1",
        method_id="m-1",
        method_name="改良分段式一刀流",
        equipment="V60",
        coffee_bean_info=CoffeeBeanInfo(name="Ethiopia Yirgacheffe", roast_level="浅度烘焙"),
        params=NoteParams(coffee="15g", water="225g", ratio="1:15", grind_size="中细", temp="92°C"),
        taste=TasteScores(acidity=4, sweetness=3, bitterness=1, body=2),
        rating=4,
        notes="柑橘明亮\n尾段略干",
        timestamp=1718000000000,
    )
