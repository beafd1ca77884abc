# almoxarifado/infra/logger.py
"""
Sistema de logging da sincronização de planilhas.

Este módulo configura e fornece loggers para registrar os ciclos de
sincronização, os downloads de CSV e o parsing de cada planilha.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar output (também liga os loggers)
ENABLE_OUTPUT = False

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem emitida (``delay=True``),
    então importar o pacote não cria arquivos.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = _LazyDirFileHandler(log_path, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


class _LazyDirFileHandler(logging.FileHandler):
    """FileHandler que cria o diretório do log só quando abre o arquivo."""

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

sync_logger = setup_logger(
    'almoxarifado.sync',
    str(LOGS_DIR / 'sync.log')
)

fetch_logger = setup_logger(
    'almoxarifado.fetch',
    str(LOGS_DIR / 'fetch.log')
)

system_logger = setup_logger(
    'almoxarifado.system',
    str(LOGS_DIR / 'system.log')
)


def _ativo() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_sync(perfil: str, data: Dict[str, Any], error: Optional[str] = None) -> None:
    """
    Registra o resultado de um ciclo de sincronização.

    Args:
        perfil: Nome do perfil sincronizado
        data: Contagens e metadados do ciclo
        error: Mensagem de problema (opcional)
    """
    if not _ativo():
        return
    if error:
        sync_logger.warning(f"SYNC_PROBLEM: {perfil} - {error} - Data: {data}")
    else:
        sync_logger.info(f"SYNC_OK: {perfil} - Data: {data}")


def log_fetch(feed: str, url: str, status: str, level: str = "info", **kwargs) -> None:
    """
    Log de download de uma planilha.

    Args:
        feed: Nome da fonte (estoque, entrada, saida, os)
        url: URL requisitada
        status: Resultado resumido (ok, http_404, html, vazio, erro_rede...)
        level: Nível do log (info, warning, error)
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {"feed": feed, "url": url, "status": status, **kwargs}
    log_method = getattr(fetch_logger, level.lower(), fetch_logger.info)
    log_method(f"FETCH_{status.upper()}: {log_data}")


def log_feed_parse(feed: str, rows_total: int, records: int, dropped: int, **kwargs) -> None:
    """Log do parsing de uma planilha (linhas lidas, registros, descartes)."""
    if not _ativo():
        return
    log_data = {
        "feed": feed,
        "rows_total": rows_total,
        "records": records,
        "dropped": dropped,
        **kwargs
    }
    fetch_logger.info(f"PARSE_{feed.upper()}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _ativo():
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def get_log_summary(log_type: str = "sync", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (sync, fetch, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not _ativo():
        return None

    log_files = {
        "sync": LOGS_DIR / "sync.log",
        "fetch": LOGS_DIR / "fetch.log",
        "system": LOGS_DIR / "system.log",
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
    return ''.join(all_lines[-lines:])
