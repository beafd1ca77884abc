import pytest

from almoxarifado.domain.policies import abaixo_do_minimo, em_excesso, parado, status_item


@pytest.mark.parametrize(
    "qtd,minimo,entradas,saidas,esperado",
    [
        (2, 5, 1, 1, "BAIXO"),
        (5, 5, 1, 1, "BAIXO"),
        (0, 0, 0, 0, "OK"),
        (80, 0, 10, 1, "EXCESSO"),
        (80, 100, 10, 1, "BAIXO"),
        (10, 0, 0, 0, "PARADO"),
        (10, 2, 3, 4, "OK"),
        (None, None, None, None, "OK"),
    ],
)
def test_status_item(qtd, minimo, entradas, saidas, esperado):
    assert status_item(qtd, minimo, entradas, saidas) == esperado


def test_limites():
    assert not abaixo_do_minimo(0, 0)
    assert not em_excesso(50, 0)
    assert em_excesso(51, 1)
    assert not em_excesso(51, 2)
    assert not parado(0, 0, 0)
    assert not parado(3, 1, 0)
