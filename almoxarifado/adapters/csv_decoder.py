"""
Decodificação de CSV publicado por planilhas.

O texto chega sem garantia de delimitador: planilhas em pt-BR exportam
com ``;`` e as demais com ``,``. O delimitador é detectado por contagem
e cada linha é dividida respeitando aspas duplas (RFC 4180).
"""

from __future__ import annotations

import re
from typing import List, Tuple

from almoxarifado.config import DEFAULTS

_QUEBRA_RE = re.compile(r"\r\n|\n|\r")


def detectar_delimitador(texto: str, amostra: int = DEFAULTS.linhas_amostra_delimitador) -> str:
    """Escolhe entre ``;`` e ``,`` contando ocorrências nas primeiras linhas.

    Considera as primeiras `amostra` linhas não vazias. Linhas longas
    (> 50 caracteres) com menos de dois de cada separador são ignoradas:
    costumam ser títulos ou observações soltas. Em empate vence ``;``.
    """
    linhas = [l for l in _QUEBRA_RE.split(texto or "") if l.strip()][:amostra]
    virgulas = 0
    pontos_virgula = 0
    for linha in linhas:
        v = linha.count(",")
        pv = linha.count(";")
        if len(linha) > 50 and v < 2 and pv < 2:
            continue
        virgulas += v
        pontos_virgula += pv
    return ";" if pontos_virgula >= virgulas else ","


def _varrer(linha: str, delimitador: str) -> Tuple[List[str], bool, bool]:
    """Percorre a linha; devolve (células, terminou entre aspas, fechou fora de borda).

    Aspas só abrem um campo citado no início da célula (ignorando
    espaços); no meio do campo são texto literal (``Tubo 1/2"``).
    """
    celulas: List[str] = []
    celula: List[str] = []
    entre_aspas = False
    fechou_no_meio = False
    acabou_de_fechar = False
    i = 0
    n = len(linha)
    while i < n:
        ch = linha[i]
        if entre_aspas:
            if ch == '"':
                if i + 1 < n and linha[i + 1] == '"':
                    celula.append('"')
                    i += 1
                else:
                    entre_aspas = False
                    acabou_de_fechar = True
            else:
                celula.append(ch)
        elif ch == delimitador:
            celulas.append("".join(celula).strip())
            celula = []
            acabou_de_fechar = False
        elif ch == '"' and not "".join(celula).strip():
            entre_aspas = True
        else:
            if acabou_de_fechar and not ch.isspace():
                fechou_no_meio = True
            celula.append(ch)
        i += 1
    celulas.append("".join(celula).strip())
    return celulas, entre_aspas, fechou_no_meio


def dividir_linha(linha: str, delimitador: str) -> List[str]:
    """Divide uma linha em células, respeitando aspas.

    - ``""`` dentro de um campo entre aspas vira ``"`` literal;
    - delimitador dentro de aspas é conteúdo;
    - aspas no meio de um campo são texto (``Tubo 1/2"``);
    - aspas sem fechamento consomem o resto da linha numa única célula.

    Cada célula é devolvida aparada.
    """
    return _varrer(linha, delimitador)[0]


def _linhas_logicas(texto: str, delimitador: str) -> List[str]:
    """Agrupa linhas físicas cujo campo entre aspas continua na linha seguinte.

    A junção só vale se as aspas fecham na borda do campo (seguidas de
    delimitador ou fim de linha). Do contrário a linha fica sozinha e a
    aspa solta consome só o resto dela.
    """
    fisicas = _QUEBRA_RE.split(texto)
    logicas: List[str] = []
    i = 0
    while i < len(fisicas):
        linha = fisicas[i]
        if not linha.strip():
            i += 1
            continue
        _, aberta, _ = _varrer(linha, delimitador)
        if aberta:
            acumulado = linha
            j = i + 1
            sujo = False
            while j < len(fisicas) and aberta:
                acumulado += "\n" + fisicas[j]
                _, aberta, sujo = _varrer(acumulado, delimitador)
                j += 1
            if not aberta and not sujo:
                logicas.append(acumulado)
                i = j
                continue
        logicas.append(linha)
        i += 1
    return logicas


def decodificar(texto: str) -> List[List[str]]:
    """Converte o texto CSV em linhas de células aparadas.

    Linhas vazias ou só com espaços são descartadas. Nunca lança exceção
    por aspas malformadas.
    """
    if not texto:
        return []
    texto = texto.lstrip("\ufeff")
    delimitador = detectar_delimitador(texto)
    return [dividir_linha(linha, delimitador) for linha in _linhas_logicas(texto, delimitador)]
