"""
UC: Sincronizar um perfil (ciclo de atualização completo).

Todas as planilhas do perfil são baixadas em paralelo; o ciclo espera
todas terminarem (com sucesso ou falha) e só então reconcilia. Uma
planilha que falha contribui com lista vazia. Cada ciclo gera um
`Snapshot` novo que substitui o anterior por inteiro.
"""

from __future__ import annotations

import asyncio
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from almoxarifado.adapters.http_source import criar_cliente, resolver_url
from almoxarifado.adapters.sheet_loader import (
    carregar_estoque,
    carregar_movimentos,
    carregar_ordens_servico,
)
from almoxarifado.config import FontesPerfil
from almoxarifado.domain.models import TIPO_ENTRADA, TIPO_SAIDA, Snapshot
from almoxarifado.infra.logger import log_sync, log_system_event
from almoxarifado.usecases.reconciliacao import reconciliar

FEEDS = ("estoque", TIPO_ENTRADA, TIPO_SAIDA, "os")


def _resultado_ou_vazio(feed: str, resultado: Any) -> List[Any]:
    if isinstance(resultado, BaseException):
        if not isinstance(resultado, Exception):
            raise resultado
        log_system_event("feed_failed", {"feed": feed, "error": repr(resultado)}, level="error")
        return []
    return resultado


async def sincronizar_async(fontes: FontesPerfil, client: Optional[httpx.AsyncClient] = None) -> Snapshot:
    """Executa um ciclo de sincronização para `fontes`.

    Args:
        fontes: URLs do perfil.
        client: Cliente HTTP assíncrono; criado (e fechado) aqui se omitido.

    Returns:
        Snapshot com itens reconciliados, movimentos, ordens de serviço e
        o sinal `erro_sincronizacao` (estoque configurado mas vazio).
    """
    if client is None:
        async with criar_cliente() as novo:
            return await sincronizar_async(fontes, novo)

    log_system_event("sync_start", {"perfil": fontes.nome})
    resultados = await asyncio.gather(
        carregar_estoque(client, fontes.estoque_url),
        carregar_movimentos(client, fontes.entradas_url, TIPO_ENTRADA),
        carregar_movimentos(client, fontes.saidas_url, TIPO_SAIDA),
        carregar_ordens_servico(client, fontes.os_url),
        return_exceptions=True,
    )
    dados: Dict[str, List[Any]] = {
        feed: _resultado_ou_vazio(feed, res) for feed, res in zip(FEEDS, resultados)
    }

    rec = reconciliar(dados["estoque"], dados[TIPO_ENTRADA], dados[TIPO_SAIDA])
    erro = resolver_url(fontes.estoque_url) is not None and not rec.itens

    contagens = {feed: len(v) for feed, v in dados.items()}
    log_sync(fontes.nome, contagens, error="estoque configurado mas vazio" if erro else None)

    return Snapshot(
        itens=rec.itens,
        movimentos=rec.movimentos,
        ordens=dados["os"],
        erro_sincronizacao=erro,
        atualizado_em=datetime.now(),
    )


def sincronizar(fontes: FontesPerfil, transport: Optional[httpx.AsyncBaseTransport] = None) -> Snapshot:
    """Versão síncrona de `sincronizar_async` (usa `asyncio.run`)."""

    async def _executar() -> Snapshot:
        async with criar_cliente(transport) as client:
            return await sincronizar_async(fontes, client)

    return asyncio.run(_executar())


class Sincronizador:
    """Mantém o snapshot vigente de um perfil.

    `atualizar` pode ser chamado por uma ação manual ou por um timer
    externo. Se dois ciclos se sobrepõem, vale o que começou por último;
    um ciclo mais antigo que termina depois é descartado.

    A CLI faz um ciclo por comando e chama `sincronizar` direto; esta
    classe é para quem embute o pipeline num processo de longa duração
    (serviço, agendador) e precisa do snapshot vigente entre ciclos.
    """

    def __init__(self, fontes: FontesPerfil, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.fontes = fontes
        self.transport = transport
        self._snapshot = Snapshot()
        self._lock = threading.Lock()
        self._iniciados = 0
        self._publicado = 0

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def atualizar(self) -> Snapshot:
        with self._lock:
            self._iniciados += 1
            geracao = self._iniciados

        novo = sincronizar(self.fontes, self.transport)

        with self._lock:
            if geracao > self._publicado:
                self._snapshot = novo
                self._publicado = geracao
            return self._snapshot
