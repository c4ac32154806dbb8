# tests/test_code_generator.py
import re

from models import Delivery
from utils.code_generator import is_autogen, new_order_number, next_code


def test_order_number_format():
    n = new_order_number(now_ms=1760861234567)
    assert re.fullmatch(r"ORD-1760861234567-[0-9A-Z]{9}", n)


def test_order_numbers_differ():
    assert len({new_order_number() for _ in range(50)}) == 50


def test_is_autogen():
    assert is_autogen(None)
    assert is_autogen("  ")
    assert is_autogen("auto")
    assert not is_autogen("DLV0009")


def test_next_code_continues_from_max(db):
    for number in ("DLV0001", "DLV0007", "OTHER-3"):
        db.add(Delivery(delivery_number=number, status="pending", items=[]))
    db.commit()
    assert next_code(db, Delivery, "delivery_number", prefix="DLV", width=4) == "DLV0008"


def test_next_code_empty_table(db):
    assert next_code(db, Delivery, "delivery_number", prefix="DLV", width=4) == "DLV0001"
