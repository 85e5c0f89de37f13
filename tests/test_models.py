import pytest

from app.models.service_detail import ServiceDetail


@pytest.mark.parametrize("box, slot, expected", [
    ("B2", "B2-01", True),
    ("B2", None, False),
    (None, "B2-01", False),
    ("", "", False),
])
def test_service_detail_is_placed_needs_box_and_slot(box, slot, expected):
    assert ServiceDetail(box_code=box, slot_code=slot).is_placed is expected
