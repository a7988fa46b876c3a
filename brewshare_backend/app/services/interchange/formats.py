# brewshare_backend/app/services/interchange/formats.py
from __future__ import annotations
from typing import Dict

from brewshare_backend.app.schemas import PourType, ValveStatus

# Purpose:
# Stable constants of the shareable text format. Changing any of these needs a
# new hidden tag, otherwise older exports stop round-tripping.

# ---- Header tags (first line of an explicit export) ----
METHOD_HEADER = "【冲煮方案】"
BEAN_HEADER = "【咖啡豆】"
NOTE_HEADER = "【冲煮记录】"

# ---- Hidden machine-readable tags ----
METHOD_TAG = "@DATA_TYPE:BREWING_METHOD@"
BEAN_TAG = "@DATA_TYPE:COFFEE_BEAN@"
NOTE_TAG = "@DATA_TYPE:BREWING_NOTE@"
TAG_PREFIX = "@DATA_TYPE"
METHOD_ID_TAG = "@METHOD_ID:"

# ---- Sentinels ----
NOT_SET = "未设置"
UNKNOWN = "未知"

# ---- Section markers ----
SECTION_BREAK = "---"
STAGES_SECTION = "冲煮步骤"
BLEND_SECTION = "拼配成分"
PARAMS_SECTION = "参数设置"
TASTE_SECTION = "风味评分"
NOTES_SECTION = "笔记"

# ---- Recipe parameter labels (method text and note text) ----
PARAM_LABELS: Dict[str, str] = {
    "coffee": "咖啡粉量",
    "water": "水量",
    "ratio": "比例",
    "grind_size": "研磨度",
    "temp": "水温",
}

# ---- Bean labels ----
BEAN_LABELS: Dict[str, str] = {
    "capacity": "容量",
    "roast_level": "烘焙度",
    "roast_date": "烘焙日期",
    "roaster": "烘焙商",
    "origin": "产地",
    "process": "处理法",
    "variety": "品种",
    "type": "类型",
    "price": "价格",
    "start_day": "养豆期",
    "end_day": "赏味期",
    "flavor": "风味标签",
    "notes": "备注",
}
REMAINING_MARK = "剩余"

# ---- Note labels ----
NOTE_LABELS: Dict[str, str] = {
    "equipment": "设备",
    "method_name": "方法",
    "bean": "咖啡豆",
    "roast_level": "烘焙度",
    "rating": "综合评分",
}
TASTE_LABELS: Dict[str, str] = {
    "acidity": "酸度",
    "sweetness": "甜度",
    "bitterness": "苦度",
    "body": "醇厚度",
}

# ---- Pour type labels ----
POUR_TYPE_LABELS: Dict[PourType, str] = {
    PourType.CENTER: "中心注水",
    PourType.CIRCLE: "绕圈注水",
    PourType.ICE: "添加冰块",
    PourType.OTHER: "其他方式",
}
VALVE_LABELS: Dict[ValveStatus, str] = {
    ValveStatus.OPEN: "阀门开启",
    ValveStatus.CLOSED: "阀门关闭",
}

# ---- Trailer sentences ----
SHARE_TRAILER = "复制以上全部文字，在「导入」中粘贴即可还原"
