import pytest

from conftest import URL
from app.crud.location_code import is_valid_location_code, _box_prefix

CODE_URL = URL + "/generate-code"


def test_generate_code_for_empty_standard_box(client, seeded):
    res = client.post(CODE_URL, json={"caja": "A1"})
    assert res.status_code == 200, res.text
    assert res.json() == {"success": True, "codigo": "ESTA-F1-P1", "caja": "A1", "tipo": "automatico"}


def test_generate_code_counts_occupied_slots(client, seeded):
    # B2 already holds one pair of an open order
    res = client.post(CODE_URL, json={"caja": " B2 "})
    body = res.json()
    assert body["codigo"] == "ESTB-F2-P2"
    assert body["caja"] == "B2"


def test_generate_code_skips_codes_in_use(client, seeded):
    client.post(URL, json={
        "locations": [{
            "detalleServicioId": 10,
            "ordenId": 5,
            "cajaAlmacenamiento": "C3",
            "codigoUbicacion": "ESTB-F2-P2",
        }],
        "empleadoId": 2,
    })

    res = client.post(CODE_URL, json={"caja": "B2"})
    assert res.json()["codigo"] == "ESTB-F2-P3"


def test_generate_code_for_free_form_box(client, seeded):
    res = client.post(CODE_URL, json={"caja": "Caja grande"})
    body = res.json()
    assert body["codigo"] == "ESTC-F1-P1"
    assert body["tipo"] == "manual"


@pytest.mark.parametrize("body", [{"caja": "   "}, {"caja": 12}, {}])
def test_generate_code_requires_box_name(client, seeded, body):
    res = client.post(CODE_URL, json=body)
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_box_codes_lists_occupied_codes(client, seeded):
    res = client.get(CODE_URL, params={"caja": "B2"})
    assert res.status_code == 200
    body = res.json()
    assert body["caja"] == "B2"
    assert body["codigos_existentes"] == [
        {"codigo_ubicacion": "B2-01", "total_pares": 1, "ordenes": "ORD-0006"}
    ]
    assert body["total_codigos_ocupados"] == 1
    assert body["proximo_codigo_sugerido"] == "ESTB-F2-P2"


def test_box_codes_ignore_delivered_orders(client, seeded):
    res = client.get(CODE_URL, params={"caja": "Z9"})
    body = res.json()
    assert body["codigos_existentes"] == []
    assert body["proximo_codigo_sugerido"] == "ESTZ-F9-P1"


def test_box_codes_requires_box(client, seeded):
    res = client.get(CODE_URL)
    assert res.status_code == 400
    assert res.json()["error"] == "A box must be specified"


@pytest.mark.parametrize("code, expected", [
    ("ESTA-F1-P1", True),
    ("estb-f2-p10", True),
    ("ESTC-F1-P2-123", True),
    ("A1-03", False),
    ("EST-AUTO-123456", False),
    ("", False),
])
def test_is_valid_location_code(code, expected):
    assert is_valid_location_code(code) is expected


@pytest.mark.parametrize("box, expected", [
    ("A1", ("A", "1")),
    ("b12", ("B", "12")),
    ("ZONA3", ("Z", "3")),
    ("Estante", ("E", "1")),
    ("9", ("X", "1")),
])
def test_box_prefix(box, expected):
    assert _box_prefix(box) == expected
