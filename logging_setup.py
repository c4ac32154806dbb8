# logging_setup.py
import logging
import sys

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """ตั้งค่า root logger ครั้งเดียวตอนเริ่มแอป (เรียกซ้ำได้ ไม่เพิ่ม handler ซ้ำ)"""
    root = logging.getLogger()
    root.setLevel(level)

    if any(getattr(h, "_vending_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler._vending_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # uvicorn access log ซ้ำกับ log ของเรา ลดระดับลง
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
