"""
Políticas de classificação de itens do estoque.

Este módulo contém as regras de negócio usadas pelos relatórios de
alerta: estoque abaixo do mínimo, excesso de estoque e itens parados.
As funções recebem valores já reconciliados (entradas/saídas acumuladas).
"""

from __future__ import annotations

from typing import Optional

# Limites do relatório de excesso
EXCESSO_QTD_MIN = 50
EXCESSO_SAIDAS_MAX = 2


def status_item(
    quantidade: Optional[float],
    minimo: Optional[float],
    entradas: Optional[float],
    saidas: Optional[float],
) -> str:
    """Classifica um item do estoque.

    Regras (avaliadas nesta ordem):
        - ``minimo > 0`` e ``quantidade <= minimo`` → ``'BAIXO'``
        - ``quantidade > 50`` e ``saidas < 2`` → ``'EXCESSO'``
        - sem entradas, sem saídas e ``quantidade > 0`` → ``'PARADO'``
        - caso contrário → ``'OK'``

    Valores ausentes são tratados como zero.

    Args:
        quantidade: Quantidade atual do item.
        minimo: Quantidade mínima cadastrada.
        entradas: Total de entradas acumuladas.
        saidas: Total de saídas acumuladas.

    Returns:
        ``'BAIXO'``, ``'EXCESSO'``, ``'PARADO'`` ou ``'OK'``.
    """
    if abaixo_do_minimo(quantidade, minimo):
        return "BAIXO"
    if em_excesso(quantidade, saidas):
        return "EXCESSO"
    if parado(quantidade, entradas, saidas):
        return "PARADO"
    return "OK"


def abaixo_do_minimo(quantidade: Optional[float], minimo: Optional[float]) -> bool:
    """Item com mínimo cadastrado (> 0) e quantidade igual ou inferior a ele."""
    mn = float(minimo or 0)
    return mn > 0 and float(quantidade or 0) <= mn


def em_excesso(quantidade: Optional[float], saidas: Optional[float]) -> bool:
    """Muito estoque e quase nenhuma saída."""
    return float(quantidade or 0) > EXCESSO_QTD_MIN and float(saidas or 0) < EXCESSO_SAIDAS_MAX


def parado(quantidade: Optional[float], entradas: Optional[float], saidas: Optional[float]) -> bool:
    """Item com saldo positivo e nenhuma movimentação."""
    return float(entradas or 0) == 0 and float(saidas or 0) == 0 and float(quantidade or 0) > 0
