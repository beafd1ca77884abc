# almoxarifado/domain/texto.py
"""
Normalização de texto usada por todas as heurísticas do pipeline.

- `normalizar`: forma canônica de comparação (sem acentos, minúsculas, aparada);
- `normalizar_codigo` / `chave_codigo`: códigos de item comparáveis entre planilhas;
- `formatar_unidade`: vocabulário fixo de unidades de medida.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_ESPACOS_RE = re.compile(r"\s+")


def normalizar(texto: Any) -> str:
    """Remove acentos (NFD + marcas combinantes), passa para minúsculas e apara.

    `None` ou vazio resultam em ``""``; nunca lança exceção.
    """
    if texto is None:
        return ""
    s = unicodedata.normalize("NFD", str(texto))
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return s.lower().strip()


def normalizar_codigo(raw: Any) -> str:
    """Código de exibição: aparado, sem aspas soltas, largura NFKC.

    Um código numérico de um único dígito recebe zero à esquerda
    (``"5"`` → ``"05"``).
    """
    if raw is None:
        return ""
    codigo = unicodedata.normalize("NFKC", str(raw)).strip().strip('"').strip()
    if len(codigo) == 1 and codigo.isdigit():
        codigo = f"0{codigo}"
    return codigo


def chave_codigo(raw: Any) -> str:
    """Chave de junção entre planilhas: código normalizado, casefold, sem espaços."""
    return _ESPACOS_RE.sub("", normalizar_codigo(raw).casefold())


def formatar_unidade(raw: Any) -> str:
    """Converte a unidade escrita na planilha para a sigla canônica.

    Vocabulário: ``un``, ``mt``, ``pç``, ``kg``, ``lt``; qualquer outra
    unidade vira as duas primeiras letras em minúsculas. Vazio → ``un``.
    """
    val = normalizar(raw).rstrip(".")
    if not val:
        return "un"

    if val.startswith("unid") or val in {"u", "un", "und", "uni"}:
        return "un"
    if val.startswith("metr") or val in {"m", "mt", "mts"}:
        return "mt"
    # "pç" normalizado vira "pc"
    if val.startswith("pec") or val in {"pc", "pcs"}:
        return "pç"
    if val.startswith("kilo") or val.startswith("quilo") or val == "kg":
        return "kg"
    if val.startswith("litr") or val in {"l", "lt", "lts"}:
        return "lt"

    return str(raw).strip()[:2].lower()
