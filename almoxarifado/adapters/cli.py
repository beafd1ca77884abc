# almoxarifado/adapters/cli.py
"""
CLI do almoxarifado (Typer).

Comandos principais:
- perfis                  -> lista os perfis configurados
- sincronizar --perfil    -> executa um ciclo e mostra o resumo
- estoque                 -> itens reconciliados do perfil
- movimentos              -> entradas e saídas (filtro por tipo/código)
- alertas                 -> itens abaixo do mínimo, em excesso ou parados
- ordens                  -> resumo das ordens de serviço
- central                 -> indicadores das saídas (setor, solicitante, motivo, turno)
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from almoxarifado.config import PERFIS_PATH, carregar_perfis, obter_perfil
from almoxarifado.domain.models import TIPO_ENTRADA, TIPO_SAIDA, Snapshot
from almoxarifado.domain.policies import status_item
from almoxarifado.domain.texto import chave_codigo
from almoxarifado.errors import ConfigError
from almoxarifado.usecases.relatorios import (
    agregado_central,
    agregado_perfil_cor,
    alertas_estoque,
    formatar_horas,
    resumo_estoque,
    resumo_ordens,
)
from almoxarifado.usecases.sincronizar import sincronizar


app = typer.Typer(help="Almoxarifado: sincronização das planilhas publicadas")
console = Console()

# código de saída quando o estoque está configurado mas veio vazio
EXIT_ERRO_SINCRONIZACAO = 2


# -----------------------
# util
# -----------------------

def _num_br(val: float) -> str:
    return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def _serializavel(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return _serializavel(asdict(obj))
    if isinstance(obj, dict):
        return {k: _serializavel(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serializavel(v) for v in obj]
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def _print_json(obj) -> None:
    typer.echo(json.dumps(_serializavel(obj), ensure_ascii=False, indent=2))


def _display_table(data: List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe uma lista de registros numa tabela Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        amostra = data[0].get(column)
        if isinstance(amostra, (int, float)) and not isinstance(amostra, bool):
            table.add_column(column, justify="right")
        elif isinstance(amostra, datetime):
            table.add_column(column, justify="center")
        else:
            table.add_column(column)

    for row in data:
        values = []
        for col in columns:
            val = row.get(col, "")
            if col == "status":
                values.append(_status_colorido(str(val)))
            elif isinstance(val, (int, float)) and not isinstance(val, bool):
                values.append(_num_br(val))
            elif isinstance(val, datetime):
                values.append(val.strftime("%d/%m/%Y"))
            elif val is None:
                values.append("")
            else:
                values.append(str(val))
        table.add_row(*values)

    console.print(table)


def _status_colorido(status: str) -> str:
    if status == "BAIXO":
        return f"[bold red]{status}[/]"
    if status in ("EXCESSO", "PARADO"):
        return f"[bold yellow]{status}[/]"
    if status == "OK":
        return f"[bold green]{status}[/]"
    return status


def _painel(linhas: List[str], title: str, border_style: str = "blue") -> None:
    console.print(Panel("\n".join(linhas), title=title, border_style=border_style))


def _carregar(perfil: str, config: str) -> Snapshot:
    """Lê o perfil e executa um ciclo de sincronização."""
    try:
        fontes = obter_perfil(perfil, config)
    except ConfigError as exc:
        typer.echo(f"Erro de configuração: {exc}", err=True)
        raise typer.Exit(code=1)
    return sincronizar(fontes)


def _avisar_erro(snapshot: Snapshot) -> None:
    if snapshot.erro_sincronizacao:
        _painel(
            ["A planilha de estoque está configurada mas nenhum item foi lido.",
             "Verifique se ela está publicada na web como CSV."],
            title="Problema de sincronização",
            border_style="red",
        )


def _linhas_itens(snapshot: Snapshot) -> List[Dict[str, Any]]:
    return [
        {
            "codigo": i.codigo,
            "descricao": i.descricao,
            "unidade": i.unidade,
            "quantidade": i.quantidade_atual,
            "minimo": i.quantidade_minima,
            "valor_unit": i.valor_unitario,
            "valor_total": i.valor_total,
            "entradas": i.entradas,
            "saidas": i.saidas,
            "status": status_item(i.quantidade_atual, i.quantidade_minima, i.entradas, i.saidas),
        }
        for i in snapshot.itens
    ]


PerfilOpt = typer.Option(..., "--perfil", "-p", help="Nome do perfil em perfis.json")
ConfigOpt = typer.Option(PERFIS_PATH, "--config", help="Caminho do arquivo de perfis")
JsonOpt = typer.Option(False, "--json", help="Imprime JSON em vez de tabelas")


# -----------------------
# comandos
# -----------------------

@app.command("perfis")
def cmd_perfis(config: str = ConfigOpt, como_json: bool = JsonOpt):
    """Lista os perfis configurados."""
    try:
        perfis = carregar_perfis(config)
    except ConfigError as exc:
        typer.echo(f"Erro de configuração: {exc}", err=True)
        raise typer.Exit(code=1)
    linhas = [asdict(p) for p in perfis.values()]
    if como_json:
        _print_json(linhas)
        return
    _display_table(linhas, title="Perfis")


@app.command("sincronizar")
def cmd_sincronizar(perfil: str = PerfilOpt, config: str = ConfigOpt, como_json: bool = JsonOpt):
    """Executa um ciclo de sincronização e mostra o resumo."""
    snapshot = _carregar(perfil, config)
    resumo = resumo_estoque(snapshot.itens)
    resumo.update({
        "movimentos": len(snapshot.movimentos),
        "ordens": len(snapshot.ordens),
        "erro_sincronizacao": snapshot.erro_sincronizacao,
        "atualizado_em": snapshot.atualizado_em,
    })
    if como_json:
        _print_json(resumo)
    else:
        _painel(
            [
                f"Itens: {resumo['total_itens']}",
                f"Valor em estoque: R$ {_num_br(resumo['valor_total'])}",
                f"Entradas: {_num_br(resumo['total_entradas'])}",
                f"Saídas: {_num_br(resumo['total_saidas'])}",
                f"Movimentos: {resumo['movimentos']}",
                f"Ordens de serviço: {resumo['ordens']}",
            ],
            title=f"Perfil {perfil}",
        )
        _avisar_erro(snapshot)
    if snapshot.erro_sincronizacao:
        raise typer.Exit(code=EXIT_ERRO_SINCRONIZACAO)


@app.command("estoque")
def cmd_estoque(perfil: str = PerfilOpt, config: str = ConfigOpt, como_json: bool = JsonOpt):
    """Itens reconciliados do perfil."""
    snapshot = _carregar(perfil, config)
    if como_json:
        _print_json(snapshot.itens)
        return
    _display_table(_linhas_itens(snapshot), title=f"Estoque - {perfil}")
    _avisar_erro(snapshot)


@app.command("movimentos")
def cmd_movimentos(
    perfil: str = PerfilOpt,
    tipo: Optional[str] = typer.Option(None, help="entrada | saida"),
    codigo: Optional[str] = typer.Option(None, help="Filtra por código do item"),
    config: str = ConfigOpt,
    como_json: bool = JsonOpt,
):
    """Entradas e saídas do perfil."""
    if tipo is not None and tipo not in (TIPO_ENTRADA, TIPO_SAIDA):
        typer.echo("Tipo inválido. Use 'entrada' ou 'saida'.", err=True)
        raise typer.Exit(code=1)
    snapshot = _carregar(perfil, config)
    movs = [
        m for m in snapshot.movimentos
        if (tipo is None or m.tipo == tipo)
        and (codigo is None or chave_codigo(m.codigo) == chave_codigo(codigo))
    ]
    if como_json:
        _print_json(movs)
        return
    _display_table(
        [
            {
                "data": m.data,
                "tipo": m.tipo,
                "codigo": m.codigo,
                "quantidade": m.quantidade,
                "valor_unit": m.valor_unitario,
                "valor_total": m.valor_total,
                "responsavel": m.responsavel or m.fornecedor or "",
            }
            for m in movs
        ],
        title=f"Movimentos - {perfil}",
    )


@app.command("alertas")
def cmd_alertas(perfil: str = PerfilOpt, config: str = ConfigOpt, como_json: bool = JsonOpt):
    """Itens abaixo do mínimo, em excesso ou parados."""
    snapshot = _carregar(perfil, config)
    alertas = alertas_estoque(snapshot.itens)
    if como_json:
        _print_json(alertas)
        return
    titulos = {"baixo": "Abaixo do mínimo", "excesso": "Em excesso", "parado": "Parados"}
    for chave, itens in alertas.items():
        _display_table(
            [
                {
                    "codigo": i.codigo,
                    "descricao": i.descricao,
                    "quantidade": i.quantidade_atual,
                    "minimo": i.quantidade_minima,
                    "saidas": i.saidas,
                }
                for i in itens
            ],
            title=titulos[chave],
        )


@app.command("ordens")
def cmd_ordens(perfil: str = PerfilOpt, config: str = ConfigOpt, como_json: bool = JsonOpt):
    """Resumo das ordens de serviço."""
    snapshot = _carregar(perfil, config)
    resumo = resumo_ordens(snapshot.ordens)
    if como_json:
        _print_json(resumo)
        return
    _painel(
        [
            f"Total de OS: {resumo['total']}",
            f"Concluídas: {resumo['concluidas']}",
            f"Com parada de máquina: {resumo['paradas']}",
            f"Horas trabalhadas: {formatar_horas(resumo['total_horas'])}",
            f"Tempo médio de resposta: {formatar_horas(resumo['tempo_medio_resposta'])}",
            f"Tempo médio de execução: {formatar_horas(resumo['tempo_medio_execucao'])}",
        ],
        title=f"Ordens de serviço - {perfil}",
    )
    _display_table(
        [
            {
                "profissional": p["profissional"],
                "ordens": p["ordens"],
                "horas": formatar_horas(p["horas"]),
                "resposta_media": formatar_horas(p["resposta_media"]),
            }
            for p in resumo["por_profissional"]
        ],
        title="Por profissional",
    )


@app.command("central")
def cmd_central(
    perfil: str = PerfilOpt,
    ano: Optional[int] = typer.Option(None, help="Ano (ex.: 2024)"),
    mes: Optional[int] = typer.Option(None, min=1, max=12, help="Mês (1-12)"),
    config: str = ConfigOpt,
    como_json: bool = JsonOpt,
):
    """Indicadores das saídas por setor, solicitante, motivo e turno."""
    snapshot = _carregar(perfil, config)
    saidas = [m for m in snapshot.movimentos if m.tipo == TIPO_SAIDA]
    dados = agregado_central(saidas, ano=ano, mes=mes)
    dados["por_perfil_cor"] = agregado_perfil_cor(saidas)
    if como_json:
        _print_json(dados)
        return

    _painel(
        [
            f"Itens retirados: {_num_br(dados['total_itens'])}",
            f"Movimentações: {dados['movimentacoes']}",
            f"Média por movimentação: {_num_br(dados['media_por_movimentacao'])}",
        ]
        + [f"{turno}: {_num_br(qtd)}" for turno, qtd in dados["turnos"].items()],
        title=f"Central - {perfil}",
    )
    _display_table(dados["por_setor"], title="Por setor")
    _display_table(dados["por_solicitante"], title="Por solicitante")
    _display_table(dados["por_motivo"], title="Por motivo")
    _display_table(dados["por_perfil_cor"], title="Por perfil e cor")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
