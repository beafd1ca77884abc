# almoxarifado/usecases/relatorios.py
"""
Relatórios sobre um snapshot sincronizado:
- resumo do estoque (itens, valor, entradas, saídas)
- alertas (abaixo do mínimo, excesso, parados)
- agregado central das saídas (setor, solicitante, motivo, turno)
- consolidado por perfil e cor
- resumo das ordens de serviço (tempos de resposta/execução, por profissional)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from almoxarifado.domain.models import ItemEstoque, Movimento, OrdemServico
from almoxarifado.domain.policies import abaixo_do_minimo, em_excesso, parado

# diferenças acima disso (em horas) são erro de digitação nas planilhas
LIMITE_HORAS_VALIDAS = 1000


# ----------------------
# util
# ----------------------

def formatar_horas(horas: Optional[float]) -> str:
    """Horas decimais em "Xh Ym"."""
    if horas is None or horas != horas or horas <= 0:
        return "0m"
    if horas > 8760:
        return "+1 ano"
    h = int(horas)
    m = round((horas - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    if h == 0:
        return f"{m}m"
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"


def _horas_entre(inicio, fim) -> Optional[float]:
    if inicio is None or fim is None:
        return None
    diff = (fim - inicio).total_seconds() / 3600
    if 0 <= diff < LIMITE_HORAS_VALIDAS:
        return diff
    return None


def _media(valores: List[float]) -> float:
    return sum(valores) / len(valores) if valores else 0.0


# ----------------------
# 1) Estoque
# ----------------------

def resumo_estoque(itens: Sequence[ItemEstoque]) -> Dict[str, float]:
    """Totais do painel principal."""
    return {
        "total_itens": len(itens),
        "valor_total": sum(i.valor_total for i in itens),
        "total_entradas": sum(i.entradas for i in itens),
        "total_saidas": sum(i.saidas for i in itens),
    }


def alertas_estoque(itens: Sequence[ItemEstoque]) -> Dict[str, List[ItemEstoque]]:
    """Itens abaixo do mínimo, em excesso e parados."""
    return {
        "baixo": [i for i in itens if abaixo_do_minimo(i.quantidade_atual, i.quantidade_minima)],
        "excesso": [i for i in itens if em_excesso(i.quantidade_atual, i.saidas)],
        "parado": [i for i in itens if parado(i.quantidade_atual, i.entradas, i.saidas)],
    }


# ----------------------
# 2) Central (saídas)
# ----------------------

def agregado_central(
    movimentos: Sequence[Movimento],
    ano: Optional[int] = None,
    mes: Optional[int] = None,
) -> Dict[str, Any]:
    """Indicadores de saída por setor, solicitante, motivo e turno.

    Args:
        movimentos: Movimentos (normalmente só as saídas).
        ano: Filtra pelo ano da data, se informado.
        mes: Filtra pelo mês (1-12), se informado.
    """
    filtrados = [
        m for m in movimentos
        if (ano is None or m.data.year == ano) and (mes is None or m.data.month == mes)
    ]
    out: Dict[str, Any] = {
        "total_itens": 0.0,
        "movimentacoes": len(filtrados),
        "media_por_movimentacao": 0.0,
        "por_setor": [],
        "por_solicitante": [],
        "por_motivo": [],
        "turnos": {"1º turno": 0.0, "2º + 3º turno": 0.0},
    }
    if not filtrados:
        return out

    df = pd.DataFrame({
        "quantidade": [m.quantidade for m in filtrados],
        "setor": [m.setor or "Outros" for m in filtrados],
        "responsavel": [m.responsavel or "N/D" for m in filtrados],
        "motivo": [m.motivo or "Geral/Não especificado" for m in filtrados],
        "turno": [str(m.turno or "").lower() for m in filtrados],
    })
    total = float(df["quantidade"].sum())
    out["total_itens"] = total
    out["media_por_movimentacao"] = round(total / len(df), 1)

    setores = (
        df.groupby("setor", sort=False)["quantidade"].sum()
        .sort_values(ascending=False, kind="stable").head(10)
    )
    out["por_setor"] = [{"nome": k, "quantidade": float(v)} for k, v in setores.items()]

    solicitantes = (
        df.groupby("responsavel", sort=False)["quantidade"].agg(["sum", "count"])
        .sort_values("count", ascending=False, kind="stable").head(10)
    )
    out["por_solicitante"] = [
        {
            "nome": nome,
            "total": float(row["sum"]),
            "movimentacoes": int(row["count"]),
            "media": round(float(row["sum"]) / int(row["count"]), 2),
        }
        for nome, row in solicitantes.iterrows()
    ]

    motivos = (
        df.groupby("motivo", sort=False)["quantidade"].sum()
        .sort_values(ascending=False, kind="stable").head(6)
    )
    out["por_motivo"] = [
        {
            "nome": k,
            "quantidade": float(v),
            "percentual": round(float(v) / total * 100, 1) if total > 0 else 0.0,
        }
        for k, v in motivos.items()
    ]

    primeiro = df["turno"].str.contains("1", regex=False)
    demais = ~primeiro & (
        df["turno"].str.contains("2", regex=False) | df["turno"].str.contains("3", regex=False)
    )
    out["turnos"] = {
        "1º turno": float(df.loc[primeiro, "quantidade"].sum()),
        "2º + 3º turno": float(df.loc[demais, "quantidade"].sum()),
    }
    return out


def agregado_perfil_cor(movimentos: Sequence[Movimento]) -> List[Dict[str, Any]]:
    """Quantidade movimentada por perfil (modelo) e cor."""
    if not movimentos:
        return []
    df = pd.DataFrame({
        "perfil": [m.perfil or "Não especificado" for m in movimentos],
        "cor": [m.cor or "N/D" for m in movimentos],
        "quantidade": [m.quantidade for m in movimentos],
    })
    agrupado = (
        df.groupby(["perfil", "cor"], sort=False)["quantidade"].sum()
        .reset_index()
        .sort_values("quantidade", ascending=False, kind="stable")
    )
    return [
        {"perfil": r.perfil, "cor": r.cor, "quantidade": float(r.quantidade)}
        for r in agrupado.itertuples(index=False)
    ]


# ----------------------
# 3) Ordens de serviço
# ----------------------

def resumo_ordens(ordens: Sequence[OrdemServico]) -> Dict[str, Any]:
    """Métricas gerais das OS e desempenho por profissional.

    Tempo de resposta = início − abertura; tempo de execução =
    fim − (início ou abertura). Diferenças negativas ou acima de
    1000 h ficam de fora das médias.
    """
    respostas = [h for h in (_horas_entre(o.data_abertura, o.data_inicio) for o in ordens) if h is not None]
    execucoes = [
        h for h in (_horas_entre(o.data_inicio or o.data_abertura, o.data_fim) for o in ordens)
        if h is not None
    ]
    out: Dict[str, Any] = {
        "total": len(ordens),
        "concluidas": sum(1 for o in ordens if o.data_fim is not None),
        "total_horas": sum(o.horas for o in ordens),
        "tempo_medio_resposta": _media(respostas),
        "tempo_medio_execucao": _media(execucoes),
        "paradas": sum(1 for o in ordens if o.parada == "Sim"),
        "por_profissional": [],
    }
    if not ordens:
        return out

    df = pd.DataFrame({
        "profissional": [o.profissionais or ["Não Atribuído"] for o in ordens],
        "horas": [o.horas for o in ordens],
        "resposta": [_horas_entre(o.data_abertura, o.data_inicio) for o in ordens],
    }).explode("profissional")
    df["resposta"] = pd.to_numeric(df["resposta"], errors="coerce")

    por_prof = (
        df.groupby("profissional", sort=False)
        .agg(ordens=("horas", "size"), horas=("horas", "sum"), resposta_media=("resposta", "mean"))
        .sort_values("ordens", ascending=False, kind="stable")
    )
    out["por_profissional"] = [
        {
            "profissional": nome,
            "ordens": int(row["ordens"]),
            "horas": float(row["horas"]),
            "resposta_media": 0.0 if pd.isna(row["resposta_media"]) else float(row["resposta_media"]),
        }
        for nome, row in por_prof.iterrows()
    ]
    return out
