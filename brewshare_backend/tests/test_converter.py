import json
import pytest
from brewshare_backend.app.schemas import BrewingNote, CoffeeBean, Method, RecordKind
from brewshare_backend.app.services.interchange import (
    bean_to_readable_text, extract_record_from_text, method_to_readable_text, record_kind,
)

def test_shared_texts_come_back_as_records(sample_method, sample_bean):
    m = extract_record_from_text(method_to_readable_text(sample_method))
    assert isinstance(m, Method) and m.name == sample_method.name
    b = extract_record_from_text(bean_to_readable_text(sample_bean))
    assert isinstance(b, CoffeeBean) and b.name == sample_bean.name

def test_fenced_json_from_a_chat_reply():
    payload = {"method": "助手方案", "params": {"stages": [{"time": 30, "label": "焖蒸", "water": "30g"}]}}
    text = "好的，这是优化后的方案：\n```json\n" + json.dumps(payload, ensure_ascii=False) + "\n```\n祝冲煮愉快！"
    rec = extract_record_from_text(text)
    assert isinstance(rec, Method)
    assert rec.name == "助手方案"
    assert rec.params.coffee == "15g"

def test_note_json():
    rec = extract_record_from_text('{"beanId": "b1", "methodId": "m1", "taste": {"acidity": 4}}')
    assert isinstance(rec, BrewingNote)
    assert rec.taste.acidity == 4

def test_unheaded_bean_text():
    rec = extract_record_from_text("名称: 哥伦比亚 慧兰\n烘焙度: 中度烘焙\n产地: 哥伦比亚")
    assert isinstance(rec, CoffeeBean)
    assert rec.name == "哥伦比亚 慧兰"
    assert rec.roast_level == "中度烘焙"

@pytest.mark.parametrize("text", [
    "",
    "今天天气不错",
    "【冲煮方案】没有步骤\n咖啡粉量: 15g",
    "【咖啡豆】\n容量: 200g",
    '{"foo": 1}',
    '{"method": "A", "params": {"stages": []}}',
])
def test_failures_return_none(text):
    assert extract_record_from_text(text) is None

def test_record_kind(sample_method, sample_bean, sample_note):
    assert record_kind(sample_method) is RecordKind.METHOD
    assert record_kind(sample_bean) is RecordKind.BEAN
    assert record_kind(sample_note) is RecordKind.NOTE
    with pytest.raises(TypeError):
        record_kind({"method": "x"})

HUGE = "9" * 400

@pytest.mark.parametrize("text", [
    "【冲煮方案】X\n冲煮步骤:\n1. [" + HUGE + "分0秒] 焖蒸 - 30g",
    "【冲煮方案】X\n冲煮步骤:\n1. [" + "9" * 5000 + "分0秒] 焖蒸 - 30g",
])
def test_oversized_stage_numbers_do_not_raise(text):
    assert extract_record_from_text(text) is None

def test_oversized_numbers_in_labelled_fields_are_survivable():
    note = extract_record_from_text("【冲煮记录】\n风味评分:\n酸度: " + HUGE + "/5\n综合评分: " + HUGE + "/5")
    assert isinstance(note, BrewingNote)
    assert note.taste.acidity == 5 and note.rating == 5

    bean = extract_record_from_text("【咖啡豆】X\n养豆期: " + HUGE + "天\n赏味期: " + "9" * 5000 + "天")
    assert isinstance(bean, CoffeeBean)
    assert bean.end_day is None

    blend = extract_record_from_text("【咖啡豆】X\n拼配成分:\n  1. " + HUGE + "% 巴西")
    assert isinstance(blend, CoffeeBean)
    assert blend.blend_components[0].percentage == "0"
