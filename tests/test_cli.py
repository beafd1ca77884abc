import json
from datetime import datetime
from pathlib import Path

import pytest
from typer.testing import CliRunner

from almoxarifado.adapters import cli
from almoxarifado.adapters.cli import app
from almoxarifado.domain.models import ItemEstoque, Movimento, OrdemServico, Snapshot

runner = CliRunner()


def _snapshot(erro=False):
    return Snapshot(
        itens=[
            ItemEstoque("05", descricao="Luva", quantidade_atual=4, quantidade_minima=10,
                        valor_unitario=12.5, valor_total=50.0, entradas=4, saidas=2),
            ItemEstoque("A-10", descricao="Parafuso", quantidade_atual=80, valor_unitario=0.1,
                        valor_total=8.0, entradas=80),
        ],
        movimentos=[
            Movimento("entrada-0", datetime(2024, 3, 5), "05", 4, "entrada", fornecedor="ACME",
                      valor_unitario=12.5),
            Movimento("saida-0", datetime(2024, 3, 6), "5", 2, "saida", responsavel="João",
                      setor="Usinagem", valor_unitario=12.5, valor_total=25.0),
        ],
        ordens=[
            OrdemServico("os-0", "101", datetime(2024, 3, 1, 8), datetime(2024, 3, 1, 9),
                         datetime(2024, 3, 1, 11), profissional="Ana", horas=2.0),
        ],
        erro_sincronizacao=erro,
        atualizado_em=datetime(2024, 3, 7, 10, 0),
    )


@pytest.fixture
def perfis(tmp_path: Path) -> str:
    path = tmp_path / "perfis.json"
    path.write_text(json.dumps({
        "perfis": [{"nome": "pecas", "estoque_url": "https://x.test/estoque.csv"}]
    }), encoding="utf-8")
    return str(path)


@pytest.fixture
def sincronizado(monkeypatch):
    recebidos = []

    def fake(fontes):
        recebidos.append(fontes)
        return _snapshot()

    monkeypatch.setattr(cli, "sincronizar", fake)
    return recebidos


def test_cli_perfis_json(perfis):
    result = runner.invoke(app, ["perfis", "--config", perfis, "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data[0]["nome"] == "pecas"
    assert data[0]["estoque_url"] == "https://x.test/estoque.csv"


def test_cli_perfis_tabela(perfis):
    result = runner.invoke(app, ["perfis", "--config", perfis])
    assert result.exit_code == 0, result.output


def test_cli_config_ausente(tmp_path: Path):
    result = runner.invoke(app, ["perfis", "--config", str(tmp_path / "nada.json")])
    assert result.exit_code == 1


def test_cli_perfil_desconhecido(perfis, sincronizado):
    result = runner.invoke(app, ["estoque", "--perfil", "outro", "--config", perfis])
    assert result.exit_code == 1
    assert sincronizado == []


def test_cli_sincronizar_json(perfis, sincronizado):
    result = runner.invoke(app, ["sincronizar", "--perfil", "pecas", "--config", perfis, "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["total_itens"] == 2
    assert data["valor_total"] == pytest.approx(58.0)
    assert data["movimentos"] == 2
    assert data["erro_sincronizacao"] is False
    assert data["atualizado_em"] == "2024-03-07T10:00:00"
    assert sincronizado[0].estoque_url == "https://x.test/estoque.csv"


def test_cli_sincronizar_erro_sai_com_codigo_2(perfis, monkeypatch):
    monkeypatch.setattr(cli, "sincronizar", lambda fontes: _snapshot(erro=True))
    result = runner.invoke(app, ["sincronizar", "--perfil", "pecas", "--config", perfis])
    assert result.exit_code == 2


@pytest.mark.parametrize("comando", ["sincronizar", "estoque", "movimentos", "alertas", "ordens", "central"])
def test_cli_comandos_em_tabela(perfis, sincronizado, comando):
    result = runner.invoke(app, [comando, "-p", "pecas", "--config", perfis])
    assert result.exit_code == 0, result.output
    assert "\u2014" not in result.output


def test_cli_estoque_json(perfis, sincronizado):
    result = runner.invoke(app, ["estoque", "-p", "pecas", "--config", perfis, "--json"])
    assert result.exit_code == 0, result.output
    itens = json.loads(result.stdout)
    assert [i["codigo"] for i in itens] == ["05", "A-10"]


def test_cli_movimentos_filtros(perfis, sincronizado):
    result = runner.invoke(
        app, ["movimentos", "-p", "pecas", "--config", perfis, "--tipo", "saida", "--json"]
    )
    assert result.exit_code == 0, result.output
    movs = json.loads(result.stdout)
    assert [m["id"] for m in movs] == ["saida-0"]
    assert movs[0]["data"] == "2024-03-06T00:00:00"

    result = runner.invoke(app, ["movimentos", "-p", "pecas", "--config", perfis, "--codigo", "5", "--json"])
    assert len(json.loads(result.stdout)) == 2


def test_cli_movimentos_tipo_invalido(perfis, sincronizado):
    result = runner.invoke(app, ["movimentos", "-p", "pecas", "--config", perfis, "--tipo", "outro"])
    assert result.exit_code == 1


def test_cli_alertas_json(perfis, sincronizado):
    result = runner.invoke(app, ["alertas", "-p", "pecas", "--config", perfis, "--json"])
    assert result.exit_code == 0, result.output
    alertas = json.loads(result.stdout)
    assert [i["codigo"] for i in alertas["baixo"]] == ["05"]
    assert [i["codigo"] for i in alertas["excesso"]] == ["A-10"]
    assert alertas["parado"] == []


def test_cli_ordens_json(perfis, sincronizado):
    result = runner.invoke(app, ["ordens", "-p", "pecas", "--config", perfis, "--json"])
    assert result.exit_code == 0, result.output
    resumo = json.loads(result.stdout)
    assert resumo["total"] == 1
    assert resumo["tempo_medio_resposta"] == pytest.approx(1.0)


def test_cli_central_json(perfis, sincronizado):
    result = runner.invoke(
        app, ["central", "-p", "pecas", "--config", perfis, "--ano", "2024", "--mes", "3", "--json"]
    )
    assert result.exit_code == 0, result.output
    dados = json.loads(result.stdout)
    assert dados["total_itens"] == 2
    assert dados["por_setor"] == [{"nome": "Usinagem", "quantidade": 2.0}]
    assert dados["por_perfil_cor"][0]["perfil"] == "Não especificado"
