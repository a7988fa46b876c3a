import json
import pytest
from brewshare_backend.app.schemas import BrewingNote, CoffeeBean, Method, PourType, ValveStatus
from brewshare_backend.app.services.interchange import (
    EmptyStagesError, MissingFieldError, UnrecognizedError,
    generate_bean_template_json, generate_optimization_json, get_example_json,
    method_to_json, parse_method_from_json,
)
from brewshare_backend.app.services.interchange.json_codec import (
    decode_json_record, is_ai_variant, normalize_ai_variant,
)

STAGE = {"time": 30, "pourTime": 10, "label": "焖蒸", "water": "30g", "pourType": "circle"}

def test_stages_take_priority_over_bean_fields():
    rec = decode_json_record({"method": "A", "roastLevel": "中度烘焙", "params": {"stages": [STAGE]}})
    assert isinstance(rec, Method)
    assert rec.name == "A"

def test_bean_and_note_shapes():
    bean = decode_json_record({"name": "耶加", "roastLevel": "浅度烘焙", "processingMethod": "水洗"})
    assert isinstance(bean, CoffeeBean)
    assert bean.process == "水洗"
    assert bean.id

    note = decode_json_record({"beanId": "b1", "methodId": "m1", "rating": 4})
    assert isinstance(note, BrewingNote)
    assert note.bean_id == "b1" and note.rating == 4
    assert note.id.startswith("note-") and note.timestamp > 0

def test_bean_without_name_fails():
    with pytest.raises(MissingFieldError):
        decode_json_record({"roastLevel": "浅度烘焙"})

def test_fallback_to_closest_kind():
    rec = decode_json_record({"name": "肯尼亚 AA", "origin": "肯尼亚"})
    assert isinstance(rec, CoffeeBean)

def test_unrelated_object_is_unrecognized():
    with pytest.raises(UnrecognizedError):
        decode_json_record({"foo": 1})

def test_missing_stages_is_empty_stages():
    res = parse_method_from_json('{"method": "A", "params": {"coffee": "15g"}}')
    assert not res.ok
    assert res.error_kind == "EmptyStages"
    assert res.record is None

def test_missing_name_and_equipment():
    res = parse_method_from_json(json.dumps({"params": {"stages": [STAGE]}}))
    assert res.error_kind == "MissingField"

def test_malformed_json():
    res = parse_method_from_json("这不是 JSON")
    assert res.error_kind == "MalformedJson"
    assert res.message

def test_json_import_fills_defaults():
    res = parse_method_from_json(json.dumps({"method": "A", "params": {"coffee": "18g", "stages": [STAGE]}}))
    assert res.ok
    p = res.record.params
    assert p.coffee == "18g"
    assert (p.water, p.ratio, p.grind_size, p.temp) == ("225g", "1:15", "中细", "92°C")

def test_json_import_always_assigns_new_id():
    a = parse_method_from_json(json.dumps({"id": "keep-me", "method": "A", "params": {"stages": [STAGE]}}))
    assert a.record.id and a.record.id != "keep-me"

def test_stage_enums_are_normalized():
    stages = [
        {**STAGE, "pourType": "spiral"},
        {**STAGE, "pourType": "unknown", "valveStatus": "half"},
        {**STAGE, "pourType": "ice", "valveStatus": "open"},
        "not a stage",
    ]
    res = parse_method_from_json(json.dumps({"method": "A", "params": {"stages": stages}}))
    got = res.record.params.stages
    assert len(got) == 3
    assert [s.pour_type for s in got] == [PourType.CIRCLE, PourType.CIRCLE, PourType.ICE]
    assert got[1].valve_status is ValveStatus.UNSET
    assert got[2].valve_status is ValveStatus.OPEN

def test_ai_variant_is_normalized_before_decode():
    payload = {
        "equipment": "V60",
        "coffeeBeanInfo": {"method": "AI 推荐方案"},
        "coffee": "16g",
        "stages": [STAGE],
    }
    assert is_ai_variant(payload)
    norm = normalize_ai_variant(payload)
    assert norm["params"]["stages"] == [STAGE]
    assert norm["method"] == "AI 推荐方案"
    assert "stages" in payload  # input untouched

    rec = decode_json_record(payload)
    assert isinstance(rec, Method)
    assert rec.name == "AI 推荐方案"
    assert rec.params.coffee == "16g"

def test_equipment_names_the_method_when_name_missing():
    rec = decode_json_record({"method": "", "equipment": "Kalita", "stages": [STAGE]})
    assert rec.name == "Kalita优化方案"

def test_direct_decoder_errors_are_typed():
    from brewshare_backend.app.services.interchange.json_codec import decode_method
    with pytest.raises(EmptyStagesError):
        decode_method({"method": "A", "params": {"stages": []}})

def test_method_to_json_shape(sample_method):
    out = json.loads(method_to_json(sample_method))
    assert set(out) == {"method", "params"}
    assert out["method"] == sample_method.name
    assert out["params"]["grindSize"] == "中细"
    assert out["params"]["stages"][1]["pourType"] == "center"
    assert out["params"]["stages"][1]["valveStatus"] == "closed"

def test_method_json_reimports(sample_method):
    res = parse_method_from_json(method_to_json(sample_method))
    assert res.ok
    assert res.record.name == sample_method.name
    assert res.record.params.stages == sample_method.params.stages

def test_optimization_payload(sample_method, sample_note):
    out = json.loads(generate_optimization_json(
        equipment="V60",
        method=sample_method.name,
        coffee_bean_info=sample_note.coffee_bean_info,
        params=sample_method.params,
        stages=sample_method.params.stages,
        current_taste=sample_note.taste,
        ideal_taste={"acidity": 4, "sweetness": 5, "bitterness": 1, "body": 3},
        notes="尾段略干",
        optimization_goal="更甜",
    ))
    assert out["coffeeBeanInfo"]["roastLevel"] == "浅度烘焙"
    assert out["currentTaste"]["acidity"] == 4
    assert len(out["params"]["stages"]) == 3
    assert out["params"]["temp"] == "92°C"

def test_example_json_is_an_importable_method():
    res = parse_method_from_json(get_example_json())
    assert res.ok
    assert res.record.name == "改良分段式一刀流"
    assert len(res.record.params.stages) == 3

def test_bean_template():
    tpl = json.loads(generate_bean_template_json())
    assert tpl["roastLevel"] == "浅度烘焙"
    assert tpl["flavor"] == []

def test_note_tolerates_null_and_malformed_blocks():
    note = decode_json_record({
        "beanId": "b1", "methodId": "m1",
        "taste": None, "params": None, "coffeeBeanInfo": "V60", "notes": None,
    })
    assert isinstance(note, BrewingNote)
    assert note.taste.acidity == 0
    assert note.params.coffee == ""
    assert note.coffee_bean_info is None
    assert note.notes == ""
