# utils/orm.py
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel


def sa_update_from_dict(obj, data: dict, allow_fields=None):
    """อัปเดตค่าใน obj จาก dict (จำกัดฟิลด์ที่อนุญาตได้)"""
    if allow_fields is None:
        allow_fields = data.keys()
    for k in allow_fields:
        if k in data:
            setattr(obj, k, data[k])
    return obj


def payload_to_columns(payload: BaseModel, exclude_unset: bool = False) -> dict:
    """
    Pydantic payload -> dict สำหรับ set ลง ORM
    - Enum -> value (คอลัมน์เป็น String)
    - ค่าที่เป็น dict/list (คอลัมน์ JSON) -> JSON-safe (datetime -> ISO string)
    """
    data = payload.model_dump(exclude_unset=exclude_unset)
    out = {}
    for k, v in data.items():
        if hasattr(v, "value") and isinstance(v, str):
            v = v.value
        elif isinstance(v, (dict, list)):
            v = jsonable_encoder(v)
        out[k] = v
    return out
