"""
Localização de cabeçalho e resolução de colunas.

As planilhas são editadas à mão: o cabeçalho não fica numa linha fixa e
os nomes de coluna variam ("Cód.", "Código do item", "CODIGO"...). A
resolução é feita em duas etapas:

1. `localizar_cabecalho`: a primeira linha (entre as 20 primeiras) com
   alguma célula contendo uma das palavras-chave da planilha;
2. `encontrar_coluna`: para cada campo canônico, uma lista ordenada de
   termos candidatos. O primeiro termo que casa vence e, para esse termo,
   a primeira coluna que casa vence. Essa ordem é intencional.

Um termo casa com a célula quando as formas normalizadas são iguais ou,
para termos com mais de 2 caracteres, quando a célula contém o termo.
Termos curtos como ``os`` só casam exatamente; termos de 3 letras como
``cor`` ou ``fim`` ainda podem casar com cabeçalhos maiores por acidente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from almoxarifado.config import DEFAULTS
from almoxarifado.domain.texto import normalizar

COLUNA_AUSENTE = -1


@dataclass(frozen=True)
class Campo:
    """Campo canônico e os termos que o identificam no cabeçalho."""
    nome: str
    termos: Tuple[str, ...]
    evitar: Tuple[str, ...] = ()


@dataclass
class Cabecalho:
    """Linha de cabeçalho encontrada (índice -1 quando não há)."""
    indice: int = -1
    colunas: List[str] = field(default_factory=list)

    @property
    def encontrado(self) -> bool:
        return self.indice >= 0


def localizar_cabecalho(
    linhas: Sequence[Sequence[str]],
    palavras_chave: Iterable[str],
    limite: int = DEFAULTS.limite_cabecalho,
) -> Cabecalho:
    """Retorna a primeira linha cujas células contêm alguma palavra-chave.

    Apenas as primeiras `limite` linhas são inspecionadas. As colunas do
    cabeçalho devolvido já estão normalizadas.
    """
    chaves = [normalizar(k) for k in palavras_chave if normalizar(k)]
    for i, linha in enumerate(linhas[:limite]):
        normalizadas = [normalizar(c) for c in linha]
        if any(chave in celula for celula in normalizadas for chave in chaves):
            return Cabecalho(indice=i, colunas=normalizadas)
    return Cabecalho()


def _casa(celula: str, termo: str) -> bool:
    if not celula or not termo:
        return False
    if celula == termo:
        return True
    return len(termo) > 2 and termo in celula


def encontrar_coluna(
    cabecalho: Cabecalho | Sequence[str],
    termos: Iterable[str],
    evitar: Iterable[str] = (),
) -> int:
    """Índice da coluna do primeiro termo que casa, ou `COLUNA_AUSENTE`.

    Células que contêm algum termo de `evitar` nunca são escolhidas
    (ex.: "valor total" não serve como valor unitário).
    """
    colunas = cabecalho.colunas if isinstance(cabecalho, Cabecalho) else list(cabecalho)
    normalizadas = [normalizar(c) for c in colunas]
    proibidos = [normalizar(e) for e in evitar if normalizar(e)]

    for termo in termos:
        alvo = normalizar(termo)
        for idx, celula in enumerate(normalizadas):
            if any(p in celula for p in proibidos):
                continue
            if _casa(celula, alvo):
                return idx
    return COLUNA_AUSENTE


def resolver_colunas(cabecalho: Cabecalho, campos: Iterable[Campo]) -> Dict[str, int]:
    """Resolve todos os campos de uma planilha: ``{nome: indice}``."""
    return {c.nome: encontrar_coluna(cabecalho, c.termos, c.evitar) for c in campos}


def celula(linha: Sequence[str], idx: int, padrao: str = "") -> str:
    """Valor da célula `idx` da linha; `padrao` se a coluna não existe ou está vazia."""
    if idx == COLUNA_AUSENTE or idx >= len(linha):
        return padrao
    valor = linha[idx]
    return valor if valor else padrao
