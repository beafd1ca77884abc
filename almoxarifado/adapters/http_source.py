"""Download do CSV publicado de uma planilha."""

from __future__ import annotations

import time
from typing import Optional

import httpx

from almoxarifado.config import DEFAULTS
from almoxarifado.infra.logger import log_fetch


def criar_cliente(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Cliente HTTP compartilhado por todas as planilhas de um ciclo."""
    return httpx.AsyncClient(
        timeout=DEFAULTS.timeout_segundos,
        headers={"User-Agent": DEFAULTS.user_agent},
        follow_redirects=True,
        transport=transport,
    )


def resolver_url(url: Optional[str]) -> Optional[str]:
    """URL efetiva da planilha, ou ``None`` se não configurada.

    Valores sem esquema são tratados como id de planilha e expandidos
    para o endpoint de exportação CSV.
    """
    alvo = (url or "").strip()
    if len(alvo) < 5:
        return None
    if not alvo.lower().startswith("http"):
        alvo = DEFAULTS.url_exportacao.format(id=alvo)
    return alvo


def montar_url(url: str, carimbo: Optional[int] = None) -> str:
    """Acrescenta o parâmetro anti-cache ``t=<epoch ms>``."""
    if carimbo is None:
        carimbo = int(time.time() * 1000)
    separador = "&" if "?" in url else "?"
    return f"{url}{separador}t={carimbo}"


def parece_html(texto: str) -> bool:
    """Página HTML (login/redirecionamento) no lugar do CSV."""
    inicio = texto.lstrip()[:64].lower()
    return inicio.startswith("<!doctype html") or inicio.startswith("<html")


async def baixar_csv(client: httpx.AsyncClient, url: Optional[str], feed: str = "csv") -> Optional[str]:
    """Baixa o texto CSV de `url`.

    Falhas de rede, status não-2xx, corpo vazio ou HTML resultam em
    ``None`` (registradas no log de fetch); nenhuma exceção HTTP escapa.
    """
    alvo = resolver_url(url)
    if alvo is None:
        log_fetch(feed, str(url or ""), "nao_configurado")
        return None
    final = montar_url(alvo)

    try:
        resp = await client.get(final)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        log_fetch(feed, final, f"http_{exc.response.status_code}", level="warning")
        return None
    except httpx.HTTPError as exc:
        log_fetch(feed, final, "erro_rede", level="error", error=str(exc))
        return None

    texto = resp.text
    if not texto.strip():
        log_fetch(feed, final, "vazio", level="warning")
        return None
    if parece_html(texto):
        log_fetch(feed, final, "html", level="warning",
                  hint="verifique se a planilha está publicada na web")
        return None

    log_fetch(feed, final, "ok", bytes=len(texto))
    return texto
