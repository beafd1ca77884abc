# almoxarifado/config.py
"""
Configurações e valores padrão do pipeline de sincronização.

O núcleo não lê variáveis de ambiente nem estado global de perfil: as URLs
de cada perfil chegam como um valor `FontesPerfil` explícito. O arquivo
JSON de perfis é lido apenas pela camada de apresentação (CLI).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict

from almoxarifado.errors import ConfigError


# Caminho padrão do arquivo de perfis
PERFIS_PATH = os.path.join(os.getcwd(), "perfis.json")


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do pipeline."""
    limite_cabecalho: int = 20  # linhas inspecionadas em busca do cabeçalho
    linhas_amostra_delimitador: int = 15
    timeout_segundos: float = 30.0
    url_exportacao: str = "https://docs.google.com/spreadsheets/d/{id}/export?format=csv"
    user_agent: str = "almoxarifado-sync/1.0"
    ano_minimo: int = 1990
    ano_maximo: int = 2100


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()


@dataclass(frozen=True)
class FontesPerfil:
    """URLs das planilhas publicadas de um perfil (setor)."""
    nome: str
    estoque_url: str = ""
    entradas_url: str = ""
    saidas_url: str = ""
    os_url: str = ""


def carregar_perfis(path: str = PERFIS_PATH) -> Dict[str, FontesPerfil]:
    """Lê o arquivo JSON de perfis.

    Formato esperado::

        {"perfis": [{"nome": "almox-pecas", "estoque_url": "...", ...}]}

    Chaves desconhecidas são ignoradas.

    Raises:
        ConfigError: arquivo ausente, JSON inválido ou perfil sem nome.
    """
    arquivo = Path(path)
    if not arquivo.exists():
        raise ConfigError(f"Arquivo de perfis não encontrado: {path}")
    try:
        dados = json.loads(arquivo.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"JSON inválido em {path}: {exc}") from exc

    lista = dados.get("perfis") if isinstance(dados, dict) else None
    if not isinstance(lista, list):
        raise ConfigError(f"{path} deve conter uma lista 'perfis'")

    permitidos = {f.name for f in fields(FontesPerfil)}
    perfis: Dict[str, FontesPerfil] = {}
    for bruto in lista:
        if not isinstance(bruto, dict) or not str(bruto.get("nome") or "").strip():
            raise ConfigError(f"Perfil sem nome em {path}")
        valores = {k: str(v or "").strip() for k, v in bruto.items() if k in permitidos}
        perfil = FontesPerfil(**valores)
        perfis[perfil.nome] = perfil
    return perfis


def obter_perfil(nome: str, path: str = PERFIS_PATH) -> FontesPerfil:
    """Retorna o perfil `nome` do arquivo de perfis."""
    perfis = carregar_perfis(path)
    if nome not in perfis:
        disponiveis = ", ".join(sorted(perfis)) or "(nenhum)"
        raise ConfigError(f"Perfil '{nome}' não encontrado. Disponíveis: {disponiveis}")
    return perfis[nome]
