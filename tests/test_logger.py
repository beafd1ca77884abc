import logging

from almoxarifado.infra import logger as log


def test_loggers_nao_propagam():
    for nome in ("almoxarifado.sync", "almoxarifado.fetch", "almoxarifado.system"):
        lg = logging.getLogger(nome)
        assert lg.propagate is False
        assert len(lg.handlers) == 1


def test_log_desabilitado_nao_faz_nada(monkeypatch):
    monkeypatch.setattr(log, "ENABLE_LOGGING", False)
    monkeypatch.setattr(log, "ENABLE_OUTPUT", False)
    assert log.get_log_summary("sync") is None
    log.log_sync("teste", {"estoque": 0})
    log.log_fetch("estoque", "https://x.test", "ok")


def test_get_log_summary_sem_arquivo(monkeypatch, tmp_path):
    monkeypatch.setattr(log, "ENABLE_LOGGING", True)
    monkeypatch.setattr(log, "LOGS_DIR", tmp_path)
    assert log.get_log_summary("sync") == "Log sync não encontrado."


def test_get_log_summary_ultimas_linhas(monkeypatch, tmp_path):
    monkeypatch.setattr(log, "ENABLE_LOGGING", True)
    monkeypatch.setattr(log, "LOGS_DIR", tmp_path)
    (tmp_path / "fetch.log").write_text("a\nb\nc\n", encoding="utf-8")
    assert log.get_log_summary("fetch", lines=2) == "b\nc\n"
