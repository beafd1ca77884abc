from datetime import datetime

import pytest

from almoxarifado.adapters.parsers import horas_hhmm, parse_data, parse_duracao, parse_numero


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("R$ 10,00", 10.0),
        ("199,79", 199.79),
        ("1.234.567", 1234567.0),
        ("1,234,567", 1234567.0),
        ("R$ 1.500,00", 1500.0),
        ("-3,5", -3.5),
        ("12", 12.0),
        (7, 7.0),
        (2.5, 2.5),
        ("", 0.0),
        ("abc", 0.0),
        ("-", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
    ],
)
def test_parse_numero(txt, esperado):
    assert parse_numero(txt) == pytest.approx(esperado)


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("05/03/2024", datetime(2024, 3, 5)),
        ("5/3/24", datetime(2024, 3, 5)),
        ("05/03/2024 14:30", datetime(2024, 3, 5, 14, 30)),
        ("05/03/2024 14:30:15", datetime(2024, 3, 5, 14, 30, 15)),
        ("05/03/20244", datetime(2024, 3, 5)),
        ("2024/03/05", datetime(2024, 3, 5)),
        ("2024-03-05", datetime(2024, 3, 5)),
        ("2024-03-05T10:00:00Z", datetime(2024, 3, 5, 10, 0)),
        ("2024-03-05T10:00:00-03:00", datetime(2024, 3, 5, 13, 0)),
    ],
)
def test_parse_data_formatos(txt, esperado):
    assert parse_data(txt) == esperado


def test_parse_data_serial():
    dt = parse_data("45000")
    assert dt is not None
    assert dt.year == 2023
    assert parse_data(45000) == dt


@pytest.mark.parametrize(
    "txt",
    ["31/13/2024", "30/02/2024", "", None, "ontem", "01/01/1980", "01/01/2200", "100"],
)
def test_parse_data_invalida(txt):
    assert parse_data(txt) is None


def test_parse_data_datetime_passa_direto():
    dt = datetime(2024, 1, 2, 3, 4)
    assert parse_data(dt) == dt


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("01:30:00", 1.5),
        ("2:15", 2.25),
        ("1,5", 1.5),
        ("3", 3.0),
        ("", 0.0),
        (None, 0.0),
    ],
)
def test_parse_duracao(txt, esperado):
    assert parse_duracao(txt) == pytest.approx(esperado)


@pytest.mark.parametrize(
    "valor,esperado",
    [
        (130, 1.5),
        (245, 2.75),
        (190, 1.9),
        (100, 1.0),
        (8, 8.0),
        (2.5, 2.5),
        (0, 0),
    ],
)
def test_horas_hhmm(valor, esperado):
    assert horas_hhmm(valor) == pytest.approx(esperado)
