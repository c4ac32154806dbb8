# utils/code_generator.py
import re
import secrets
import string
import time

from sqlalchemy.orm import Session

_BASE36 = string.digits + string.ascii_uppercase


def next_code(db: Session, model, field: str, prefix: str, width: int) -> str:
    """
    Running ต่อเนื่องแบบ PREFIX#### เช่น DLV0001, DLV0002
    """
    col = getattr(model, field)
    pat = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    max_n = 0
    for (code,) in db.query(col).filter(col.like(f"{prefix}%")).all():
        m = pat.match(code or "")
        if m:
            n = int(m.group(1))
            if n > max_n:
                max_n = n
    return f"{prefix}{str(max_n + 1).zfill(width)}"


def new_order_number(now_ms: int | None = None, suffix_len: int = 9) -> str:
    """
    ORD-<epoch ms>-<base36 สุ่ม 9 ตัว> เช่น ORD-1760861234567-K3J9Q0ZP1
    ไม่มีการจองเลข: unique ทางสถิติ + unique constraint ที่ตาราง orders
    """
    ms = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(suffix_len))
    return f"ORD-{ms}-{suffix}"


def is_autogen(raw: str | None) -> bool:
    return (raw or "").strip().upper() in ("", "AUTO", "AUTOGEN")
