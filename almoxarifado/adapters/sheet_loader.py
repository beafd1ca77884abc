# almoxarifado/adapters/sheet_loader.py
"""
Loaders das planilhas publicadas: ESTOQUE, ENTRADAS/SAÍDAS e ORDENS DE SERVIÇO.

Essas funções:
- decodificam o CSV (delimitador detectado, aspas respeitadas);
- localizam o cabeçalho e resolvem as colunas por termos candidatos;
- convertem cada linha num registro do domínio ou a descartam.

Observações:
- Nenhuma função lança exceção: planilha sem cabeçalho reconhecível
  resulta em lista vazia; linha defeituosa é descartada sozinha.
- Entradas, saídas e preços resolvidos do estoque ficam zerados aqui;
  quem preenche é a reconciliação.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import httpx

from almoxarifado.adapters.csv_decoder import decodificar
from almoxarifado.adapters.http_source import baixar_csv
from almoxarifado.adapters.parsers import (
    horas_hhmm,
    parse_data,
    parse_duracao,
    parse_numero,
)
from almoxarifado.adapters.schema import (
    COLUNA_AUSENTE,
    Campo,
    celula,
    localizar_cabecalho,
    resolver_colunas,
)
from almoxarifado.domain.models import (
    TIPO_ENTRADA,
    TIPO_SAIDA,
    ItemEstoque,
    Movimento,
    OrdemServico,
)
from almoxarifado.domain.texto import (
    chave_codigo,
    formatar_unidade,
    normalizar,
    normalizar_codigo,
)
from almoxarifado.infra.logger import log_feed_parse, log_system_event


FEED_ESTOQUE = "estoque"
FEED_OS = "os"


# ---------------------------
# mapeamento de colunas
# ---------------------------

PALAVRAS_ESTOQUE = ("cod",)

CAMPOS_ESTOQUE = (
    Campo("codigo", ("codigo", "cod"), evitar=("barras", "ean")),
    Campo("descricao", ("descricao", "descri", "nome")),
    Campo("equipamento", ("equipamento", "equip", "maquina")),
    Campo("localizacao", ("localizacao", "local", "prateleira", "endereco")),
    Campo("fornecedor", ("fornecedor", "fabricante")),
    Campo("unidade", ("unidade de medida", "medida", "unidade", "und")),
    Campo(
        "quantidade",
        ("quantidade em estoque", "estoque atual", "saldo", "quant", "qtd", "estoque"),
        evitar=("min", "entrad", "said"),
    ),
    Campo("quantidade_minima", ("estoque minimo", "minim", "min")),
    Campo("categoria", ("categoria", "categ", "grupo", "familia", "tipo", "classe")),
    Campo(
        "valor_unitario",
        ("valor unitario", "vl. unit", "vl unit", "preco unit", "preco", "custo unit"),
        evitar=("total",),
    ),
)

# Termo exato da planilha de cada direção primeiro, genéricos depois
TERMOS_QUANTIDADE = {
    TIPO_ENTRADA: ("quantidade recebida", "recebida", "qtd", "quantidade"),
    TIPO_SAIDA: ("quantidade retirada", "retirada", "qtd", "quantidade"),
}


def palavras_movimento(tipo: str) -> tuple:
    return ("cod", "data", TERMOS_QUANTIDADE[tipo][0])


def campos_movimento(tipo: str) -> tuple:
    """Campos de uma planilha de movimentação na ordem de prioridade."""
    return (
        Campo("data", ("data", "dia", "registro")),
        Campo("codigo", ("codigo", "cod", "item"), evitar=("barras", "ean")),
        Campo("quantidade", TERMOS_QUANTIDADE[tipo], evitar=("min",)),
        Campo("fornecedor", ("fornecedor", "fabricante")),
        Campo(
            "responsavel",
            ("responsavel", "retirado por", "solicitante", "funcionario", "equipe", "destino"),
        ),
        Campo(
            "valor_unitario",
            ("valor unitario", "vl. unit", "vl unit", "preco unit"),
            evitar=("total", "bruto", "ean", "barras", "cnpj", "nota"),
        ),
        Campo(
            "valor_total",
            ("valor total", "vl. total", "vl total"),
            evitar=("unit", "ean", "barras", "cnpj", "nota"),
        ),
        Campo("setor", ("setor", "departamento")),
        Campo("perfil", ("perfil",)),
        Campo("cor", ("cor",)),
        Campo("motivo", ("motivo", "finalidade", "aplicacao")),
        Campo("turno", ("turno",)),
    )


PALAVRAS_OS = ("abertura", "ordem", "profissional", "equipamento")

CAMPOS_OS = (
    Campo("numero", ("numero da os", "numero os", "n os", "os", "ordem de servico", "ordem", "numero")),
    Campo("abertura", ("data de abertura", "data abertura", "abertura", "data")),
    Campo("inicio", ("data de inicio", "data inicio", "inicio")),
    Campo("fim", ("data de fim", "data fim", "termino", "conclusao", "encerramento", "finalizacao", "fim")),
    Campo("profissional", ("profissional", "tecnico", "executante", "mecanico", "responsavel")),
    Campo("equipamento", ("equipamento", "maquina", "equip")),
    Campo("setor", ("setor", "departamento", "area")),
    Campo("status", ("status", "situacao")),
    Campo("horas", ("horas", "tempo", "duracao")),
    Campo("descricao", ("descricao", "servico executado", "problema", "observacao")),
    Campo("parada", ("parada", "parou")),
    Campo("natureza", ("natureza", "tipo de manutencao", "tipo")),
)

AFIRMATIVOS = {"sim", "s", "1"}


# ---------------------------
# utilitários
# ---------------------------

def _opcional(linha: Sequence[str], idx: int) -> Optional[str]:
    valor = celula(linha, idx)
    return valor or None


def _valor_opcional(linha: Sequence[str], idx: int) -> Optional[float]:
    if idx == COLUNA_AUSENTE:
        return None
    return parse_numero(celula(linha, idx))


def _flag_sim_nao(valor: str) -> str:
    return "Sim" if normalizar(valor) in AFIRMATIVOS else "Não"


def _horas_os(bruto: str) -> float:
    if ":" in bruto:
        return parse_duracao(bruto)
    return horas_hhmm(parse_numero(bruto))


def _preparar(texto: Optional[str], feed: str, palavras: Sequence[str]):
    """Decodifica e localiza o cabeçalho; ``None`` se a planilha não serve."""
    if not texto:
        return None
    linhas = decodificar(texto)
    if not linhas:
        return None
    cab = localizar_cabecalho(linhas, palavras)
    if not cab.encontrado:
        log_system_event("header_not_found", {"feed": feed, "keywords": list(palavras),
                                              "rows": len(linhas)}, level="warning")
        return None
    return linhas, cab


# ---------------------------
# ESTOQUE
# ---------------------------

def _linha_para_item(linha: Sequence[str], col: Dict[str, int]) -> Optional[ItemEstoque]:
    codigo = normalizar_codigo(celula(linha, col["codigo"]))
    if not codigo:
        return None
    return ItemEstoque(
        codigo=codigo,
        descricao=celula(linha, col["descricao"]),
        equipamento=celula(linha, col["equipamento"], "N/D"),
        localizacao=celula(linha, col["localizacao"]),
        fornecedor=celula(linha, col["fornecedor"]),
        quantidade_atual=parse_numero(celula(linha, col["quantidade"])),
        quantidade_minima=parse_numero(celula(linha, col["quantidade_minima"])),
        unidade=formatar_unidade(celula(linha, col["unidade"], "un.")),
        categoria=celula(linha, col["categoria"], "Geral"),
        valor_unitario=parse_numero(celula(linha, col["valor_unitario"])),
    )


def parse_estoque(texto: Optional[str]) -> List[ItemEstoque]:
    """Converte o CSV do ESTOQUE em itens, um por código.

    Códigos repetidos: a última linha vence. Sem coluna de código
    reconhecível a planilha inteira é ignorada.
    """
    preparado = _preparar(texto, FEED_ESTOQUE, PALAVRAS_ESTOQUE)
    if preparado is None:
        return []
    linhas, cab = preparado
    col = resolver_colunas(cab, CAMPOS_ESTOQUE)
    if col["codigo"] == COLUNA_AUSENTE:
        log_system_event("code_column_missing", {"feed": FEED_ESTOQUE}, level="warning")
        return []

    itens: Dict[str, ItemEstoque] = {}
    dados = linhas[cab.indice + 1:]
    descartadas = 0
    for linha in dados:
        item = _linha_para_item(linha, col)
        if item is None:
            descartadas += 1
            continue
        itens[chave_codigo(item.codigo)] = item

    log_feed_parse(FEED_ESTOQUE, len(dados), len(itens), descartadas,
                   duplicados=len(dados) - descartadas - len(itens))
    return list(itens.values())


# ---------------------------
# ENTRADAS / SAÍDAS
# ---------------------------

def _linha_para_movimento(
    linha: Sequence[str], col: Dict[str, int], tipo: str, indice: int
) -> Optional[Movimento]:
    idx_codigo = col["codigo"] if col["codigo"] != COLUNA_AUSENTE else 0
    codigo = normalizar_codigo(celula(linha, idx_codigo))
    if not codigo:
        return None

    # sem data válida a linha é descartada (nada de "hoje" como padrão)
    data = parse_data(celula(linha, col["data"]))
    if data is None:
        return None

    quantidade = parse_numero(celula(linha, col["quantidade"]))
    if quantidade == 0:
        return None

    return Movimento(
        id=f"{tipo}-{indice}",
        data=data,
        codigo=codigo,
        quantidade=quantidade,
        tipo=tipo,
        fornecedor=_opcional(linha, col["fornecedor"]),
        responsavel=_opcional(linha, col["responsavel"]),
        valor_unitario=_valor_opcional(linha, col["valor_unitario"]),
        valor_total=_valor_opcional(linha, col["valor_total"]),
        setor=_opcional(linha, col["setor"]),
        perfil=_opcional(linha, col["perfil"]),
        cor=_opcional(linha, col["cor"]),
        motivo=_opcional(linha, col["motivo"]),
        turno=_opcional(linha, col["turno"]),
    )


def parse_movimentos(texto: Optional[str], tipo: str) -> List[Movimento]:
    """Converte o CSV de ENTRADAS ou SAÍDAS em movimentos.

    Args:
        texto: Conteúdo CSV.
        tipo: ``'entrada'`` ou ``'saida'``; define os termos da coluna
            de quantidade ("recebida" x "retirada").

    Returns:
        Movimentos com data válida e quantidade diferente de zero.
    """
    if tipo not in TERMOS_QUANTIDADE:
        raise ValueError(f"tipo de movimento inválido: {tipo!r}")
    preparado = _preparar(texto, tipo, palavras_movimento(tipo))
    if preparado is None:
        return []
    linhas, cab = preparado
    col = resolver_colunas(cab, campos_movimento(tipo))

    dados = linhas[cab.indice + 1:]
    movimentos: List[Movimento] = []
    for i, linha in enumerate(dados):
        mov = _linha_para_movimento(linha, col, tipo, i)
        if mov is not None:
            movimentos.append(mov)

    log_feed_parse(tipo, len(dados), len(movimentos), len(dados) - len(movimentos))
    return movimentos


# ---------------------------
# ORDENS DE SERVIÇO
# ---------------------------

def _linha_para_os(linha: Sequence[str], col: Dict[str, int], indice: int) -> Optional[OrdemServico]:
    abertura = parse_data(celula(linha, col["abertura"]))
    if abertura is None:
        return None
    inicio = parse_data(celula(linha, col["inicio"]))
    fim = parse_data(celula(linha, col["fim"]))

    horas = _horas_os(celula(linha, col["horas"]))
    if horas == 0 and inicio is not None and fim is not None and fim >= inicio:
        horas = (fim - inicio).total_seconds() / 3600

    return OrdemServico(
        id=f"os-{indice}",
        numero=celula(linha, col["numero"]),
        data_abertura=abertura,
        data_inicio=inicio,
        data_fim=fim,
        profissional=celula(linha, col["profissional"]),
        equipamento=celula(linha, col["equipamento"]),
        setor=celula(linha, col["setor"]),
        status=celula(linha, col["status"]),
        horas=horas,
        descricao=celula(linha, col["descricao"]),
        parada=_flag_sim_nao(celula(linha, col["parada"])),
        natureza=celula(linha, col["natureza"]),
    )


def parse_ordens_servico(texto: Optional[str]) -> List[OrdemServico]:
    """Converte o CSV de ORDENS DE SERVIÇO; exige data de abertura válida."""
    preparado = _preparar(texto, FEED_OS, PALAVRAS_OS)
    if preparado is None:
        return []
    linhas, cab = preparado
    col = resolver_colunas(cab, CAMPOS_OS)

    dados = linhas[cab.indice + 1:]
    ordens: List[OrdemServico] = []
    for i, linha in enumerate(dados):
        ordem = _linha_para_os(linha, col, i)
        if ordem is not None:
            ordens.append(ordem)

    log_feed_parse(FEED_OS, len(dados), len(ordens), len(dados) - len(ordens))
    return ordens


# ---------------------------
# loaders públicos (HTTP)
# ---------------------------

async def carregar_estoque(client: httpx.AsyncClient, url: Optional[str]) -> List[ItemEstoque]:
    """Baixa e interpreta a planilha de ESTOQUE; ``[]`` em qualquer falha."""
    return parse_estoque(await baixar_csv(client, url, FEED_ESTOQUE))


async def carregar_movimentos(client: httpx.AsyncClient, url: Optional[str], tipo: str) -> List[Movimento]:
    """Baixa e interpreta uma planilha de ENTRADAS ou SAÍDAS."""
    return parse_movimentos(await baixar_csv(client, url, tipo), tipo)


async def carregar_ordens_servico(client: httpx.AsyncClient, url: Optional[str]) -> List[OrdemServico]:
    """Baixa e interpreta a planilha de ORDENS DE SERVIÇO."""
    return parse_ordens_servico(await baixar_csv(client, url, FEED_OS))
