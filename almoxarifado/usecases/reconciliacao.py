"""
UC: Reconciliar ESTOQUE + ENTRADAS + SAÍDAS.

Executado uma vez por ciclo de sincronização, depois que todas as
planilhas responderam (ou falharam):

1. mapa de preços por código: último valor unitário positivo das
   entradas (ordem da planilha); sem ele, valor total / quantidade da
   última entrada que traz os dois; por fim o valor unitário da própria
   planilha de estoque, se positivo;
2. cada saída recebe preço resolvido e valor total;
3. cada item recebe preço, valor total, entradas e saídas acumuladas;
4. movimentos = entradas ++ saídas precificadas (sem reordenar).

Nada aqui lança exceção nem altera os registros recebidos.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Sequence

from almoxarifado.domain.models import ItemEstoque, Movimento
from almoxarifado.domain.texto import chave_codigo


@dataclass
class Reconciliacao:
    itens: List[ItemEstoque] = field(default_factory=list)
    movimentos: List[Movimento] = field(default_factory=list)


def mapa_de_precos(itens: Sequence[ItemEstoque], entradas: Sequence[Movimento]) -> Dict[str, float]:
    """Preço unitário por chave de código.

    Códigos sem nenhuma entrada com valor unitário positivo usam
    valor total / quantidade da última entrada que traz os dois.
    """
    precos: Dict[str, float] = {}
    por_total: Dict[str, float] = {}
    for mov in entradas:
        chave = chave_codigo(mov.codigo)
        if mov.valor_unitario is not None and mov.valor_unitario > 0:
            precos[chave] = mov.valor_unitario
        elif mov.valor_total is not None and mov.valor_total > 0 and mov.quantidade > 0:
            por_total[chave] = mov.valor_total / mov.quantidade
    for chave, preco in por_total.items():
        precos.setdefault(chave, preco)
    for item in itens:
        chave = chave_codigo(item.codigo)
        if chave not in precos and item.valor_unitario > 0:
            precos[chave] = item.valor_unitario
    return precos


def precificar_saidas(saidas: Sequence[Movimento], precos: Dict[str, float]) -> List[Movimento]:
    """Saídas com valor unitário resolvido e valor total = quantidade × preço."""
    resultado = []
    for mov in saidas:
        preco = precos.get(chave_codigo(mov.codigo)) or mov.valor_unitario or 0.0
        resultado.append(replace(mov, valor_unitario=preco, valor_total=mov.quantidade * preco))
    return resultado


def _somar_por_codigo(movimentos: Sequence[Movimento]) -> Dict[str, float]:
    totais: Dict[str, float] = defaultdict(float)
    for mov in movimentos:
        totais[chave_codigo(mov.codigo)] += mov.quantidade
    return totais


def _ultima_data_por_codigo(movimentos: Sequence[Movimento]) -> Dict[str, datetime]:
    ultimas: Dict[str, datetime] = {}
    for mov in movimentos:
        chave = chave_codigo(mov.codigo)
        if chave not in ultimas or mov.data > ultimas[chave]:
            ultimas[chave] = mov.data
    return ultimas


def _fornecedor_por_codigo(entradas: Sequence[Movimento]) -> Dict[str, str]:
    """Fornecedor da entrada mais recente (por data) que informa um."""
    escolhidos: Dict[str, Movimento] = {}
    for mov in entradas:
        if not mov.fornecedor:
            continue
        chave = chave_codigo(mov.codigo)
        atual = escolhidos.get(chave)
        if atual is None or mov.data >= atual.data:
            escolhidos[chave] = mov
    return {chave: mov.fornecedor for chave, mov in escolhidos.items()}


def reconciliar(
    itens: Sequence[ItemEstoque],
    entradas: Sequence[Movimento],
    saidas: Sequence[Movimento],
) -> Reconciliacao:
    """Junta as três planilhas pelo código normalizado.

    Returns:
        `Reconciliacao` com itens precificados e a lista unificada de
        movimentos (entradas seguidas das saídas precificadas).
    """
    precos = mapa_de_precos(itens, entradas)
    saidas_precificadas = precificar_saidas(saidas, precos)

    total_entradas = _somar_por_codigo(entradas)
    total_saidas = _somar_por_codigo(saidas_precificadas)
    movimentos = list(entradas) + saidas_precificadas
    ultimas = _ultima_data_por_codigo(movimentos)
    fornecedores = _fornecedor_por_codigo(entradas)

    resultado: List[ItemEstoque] = []
    for item in itens:
        chave = chave_codigo(item.codigo)
        preco = precos.get(chave) or item.valor_unitario or 0.0
        resultado.append(replace(
            item,
            valor_unitario=preco,
            valor_total=item.quantidade_atual * preco,
            entradas=total_entradas.get(chave, 0.0),
            saidas=total_saidas.get(chave, 0.0),
            fornecedor=item.fornecedor or fornecedores.get(chave, ""),
            ultima_movimentacao=ultimas.get(chave),
        ))

    return Reconciliacao(itens=resultado, movimentos=movimentos)
