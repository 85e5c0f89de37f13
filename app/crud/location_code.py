import re
from sqlalchemy.orm import Session
from typing import List, Dict, Any, Tuple
from app.models.order import Order, ServiceStatus
from app.models.service_detail import ServiceDetail
from app.crud.storage_location import find_slot_code_usage, active_order_condition

# EST<letter>-F<number>-P<position>, optionally with a numeric suffix
LOCATION_CODE_PATTERN = re.compile(r"^EST[A-Z]-F\d+-P\d+(-\d+)?$")
STANDARD_BOX_PATTERN = re.compile(r"^[A-Z]\d+$", re.IGNORECASE)
BOX_PARTS_PATTERN = re.compile(r"([A-Z]+)(\d+)")

CODE_TYPE_AUTOMATIC = "automatico"
CODE_TYPE_MANUAL = "manual"

def is_valid_location_code(code: str) -> bool:
    if not code or not code.strip():
        return False
    return LOCATION_CODE_PATTERN.match(code.strip().upper()) is not None

def _box_prefix(box: str) -> Tuple[str, str]:
    """Letter and shelf number used in codes for ``box`` (A1 -> A, 1)"""
    upper = box.upper()
    match = BOX_PARTS_PATTERN.search(upper)
    if match:
        return match.group(1)[0], match.group(2)
    letter = upper[0] if upper and upper[0].isalpha() else "X"
    return letter, "1"

def _occupied_in_box_query(db: Session, box: str):
    return db.query(ServiceDetail)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .filter(
            ServiceDetail.box_code == box,
            ServiceDetail.slot_code.isnot(None),
            active_order_condition(),
        )

def count_occupied_slots(db: Session, box: str) -> int:
    return _occupied_in_box_query(db, box).count()

def generate_location_code(db: Session, box: str) -> Tuple[str, str]:
    """Propose the next free slot code for ``box``.

    Returns the code and whether the box name followed the standard
    letter+digits form ("automatico") or not ("manual").
    """
    letter, number = _box_prefix(box)
    position = count_occupied_slots(db, box) + 1
    code = f"EST{letter}-F{number}-P{position}"
    while find_slot_code_usage(db, code) is not None:
        position += 1
        code = f"EST{letter}-F{number}-P{position}"

    code_type = CODE_TYPE_AUTOMATIC if STANDARD_BOX_PATTERN.match(box) else CODE_TYPE_MANUAL
    return code, code_type

def get_box_codes(db: Session, box: str) -> List[Dict[str, Any]]:
    """Occupied slot codes of ``box`` with pair counts and the orders holding them"""
    rows = db.query(ServiceDetail.slot_code, Order.code)\
        .select_from(ServiceDetail)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .filter(
            ServiceDetail.box_code == box,
            ServiceDetail.slot_code.isnot(None),
            active_order_condition(),
        )\
        .order_by(ServiceDetail.slot_code, Order.code)\
        .all()

    codes: Dict[str, Dict[str, Any]] = {}
    for slot_code, order_code in rows:
        entry = codes.setdefault(slot_code, {"codigo_ubicacion": slot_code, "total_pares": 0, "ordenes": []})
        entry["total_pares"] += 1
        if order_code not in entry["ordenes"]:
            entry["ordenes"].append(order_code)

    return [
        {**entry, "ordenes": ",".join(entry["ordenes"])}
        for entry in codes.values()
    ]
