"""
Utilidades de parsing para valores vindos das planilhas.

Este módulo interpreta os valores primitivos encontrados nas planilhas
publicadas: números com pontuação brasileira ou americana, datas em
DD/MM/AAAA, números seriais de planilha ou ISO, e durações em
H:M:S, decimal ou HHMM compactado. Nenhuma função lança exceção:
valores ilegíveis viram ``0.0`` ou ``None``.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from almoxarifado.config import DEFAULTS

_MOEDA_RE = re.compile(r"R\$|US\$|\$|€|£", re.IGNORECASE)
_ESPACOS_RE = re.compile(r"\s+")
_NAO_NUMERICO_RE = re.compile(r"[^0-9.\-]")
_SERIAL_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_DATA_BR_RE = re.compile(
    r"^(\d{1,2})/(\d{1,2})/(\d{2,5})"
    r"(?:[ T]+(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?)?$"
)
_DATA_YMD_RE = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")

# 1899-12-30 é o dia zero das planilhas (25569 dias antes de 1970-01-01)
_SERIAL_OFFSET_DIAS = 25569
_EPOCH = datetime(1970, 1, 1)


# ---------------------------
# números
# ---------------------------

def parse_numero(valor: Any) -> float:
    """Interpreta um número em formato brasileiro ou americano.

    Regras de separador:
        - só vírgula → vírgula decimal (``"199,79"`` → 199.79); várias
          vírgulas sozinhas são separadores de milhar;
        - ponto e vírgula → o que aparece primeiro é o separador de milhar
          (``"1.234,56"`` e ``"1,234.56"`` → 1234.56);
        - vários pontos sozinhos → separadores de milhar.

    Símbolos de moeda, espaços (inclusive não-quebráveis) e quaisquer
    caracteres além de dígitos, ``.`` e ``-`` são descartados.

    Returns:
        O número, ou ``0.0`` quando o resultado não é finito.
    """
    if valor is None or isinstance(valor, bool):
        return 0.0
    if isinstance(valor, (int, float)):
        return float(valor) if math.isfinite(valor) else 0.0

    s = _MOEDA_RE.sub("", str(valor)).replace("\u00a0", "")
    s = _ESPACOS_RE.sub("", s)
    if not s:
        return 0.0

    if "," in s and "." in s:
        if s.index(".") < s.index(","):
            milhar, decimal = ".", ","
        else:
            milhar, decimal = ",", "."
        s = s.replace(milhar, "").replace(decimal, ".")
    elif "," in s:
        s = s.replace(",", ".") if s.count(",") == 1 else s.replace(",", "")
    elif s.count(".") > 1:
        s = s.replace(".", "")

    s = _NAO_NUMERICO_RE.sub("", s)
    try:
        num = float(s)
    except ValueError:
        return 0.0
    return num if math.isfinite(num) else 0.0


# ---------------------------
# datas
# ---------------------------

def _no_intervalo(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if not (DEFAULTS.ano_minimo <= dt.year <= DEFAULTS.ano_maximo):
        return None
    return dt


def _de_serial(serial: float) -> Optional[datetime]:
    try:
        ms = round((serial - _SERIAL_OFFSET_DIAS) * 86400 * 1000)
        return _EPOCH + timedelta(milliseconds=ms)
    except (OverflowError, ValueError):
        return None


def _corrige_ano(ano: str) -> Optional[int]:
    """Ano com 2 dígitos → 20AA; com 5 dígitos, descarta o caractere intruso."""
    if len(ano) == 2:
        return 2000 + int(ano)
    if len(ano) != 5:
        return int(ano)
    # tenta da direita para a esquerda: "20244" → 2024, "22024" → 2024
    for i in range(len(ano) - 1, -1, -1):
        candidato = int(ano[:i] + ano[i + 1:])
        if DEFAULTS.ano_minimo <= candidato <= DEFAULTS.ano_maximo:
            return candidato
    return None


def _de_data_br(s: str) -> Optional[datetime]:
    m = _DATA_BR_RE.match(s)
    if not m:
        ymd = _DATA_YMD_RE.match(s)
        if not ymd:
            return None
        try:
            return datetime(int(ymd.group(1)), int(ymd.group(2)), int(ymd.group(3)))
        except ValueError:
            return None

    dia, mes, ano_txt, hh, mm, ss = m.groups()
    ano = _corrige_ano(ano_txt)
    if ano is None:
        return None
    try:
        return datetime(
            ano, int(mes), int(dia),
            int(hh or 0), int(mm or 0), int(ss or 0),
        )
    except ValueError:
        return None


def _de_iso(s: str) -> Optional[datetime]:
    texto = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        dt = datetime.fromisoformat(texto)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_data(valor: Any) -> Optional[datetime]:
    """Interpreta uma data de planilha.

    Aceita, nesta ordem:
        1. número serial de planilha (dias desde 1899-12-30), quando o
           texto é puramente numérico e não tem barra;
        2. ``DD/MM/AAAA[ HH:MM[:SS]]`` (ano com 2 dígitos vira 20AA; ano
           com 5 dígitos tem o caractere intruso removido) ou ``AAAA/MM/DD``;
        3. ISO 8601 (``2024-03-05``, ``2024-03-05T10:00:00Z``...).

    Datas com ano fora de [1990, 2100] são rejeitadas.

    Returns:
        ``datetime`` ingênuo, ou ``None`` se não for possível interpretar.
    """
    if valor is None:
        return None
    if isinstance(valor, datetime):
        return _no_intervalo(valor)

    s = str(valor).strip()
    if not s:
        return None

    if "/" not in s and _SERIAL_RE.match(s):
        return _no_intervalo(_de_serial(float(s)))
    if "/" in s:
        return _no_intervalo(_de_data_br(s))
    return _no_intervalo(_de_iso(s))


# ---------------------------
# durações
# ---------------------------

def parse_duracao(valor: Any) -> float:
    """Converte ``H:M[:S]`` em horas decimais; sem ``:`` usa `parse_numero`.

    Exemplos:
        ``"01:30:00"`` → 1.5, ``"2:15"`` → 2.25, ``"1,5"`` → 1.5
    """
    if valor is None:
        return 0.0
    s = str(valor).strip()
    if ":" not in s:
        return parse_numero(s)

    partes = s.split(":")
    horas = parse_numero(partes[0])
    minutos = parse_numero(partes[1]) if len(partes) > 1 else 0.0
    segundos = parse_numero(partes[2]) if len(partes) > 2 else 0.0
    return horas + minutos / 60 + segundos / 3600


def horas_hhmm(valor: float) -> float:
    """Decodifica horas gravadas como inteiro HHMM.

    Um inteiro >= 100 cujo componente de minutos é < 60 é lido como
    horas e minutos (``130`` → 1.5). Se os minutos passam de 59 o valor
    é tratado como horas * 100 (``190`` → 1.9). Demais valores voltam
    inalterados.
    """
    if valor >= 100 and float(valor).is_integer():
        inteiro = int(valor)
        minutos = inteiro % 100
        if minutos < 60:
            return inteiro // 100 + minutos / 60
        return valor / 100
    return valor
