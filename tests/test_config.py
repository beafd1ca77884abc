import json

import pytest

from almoxarifado.config import FontesPerfil, carregar_perfis, obter_perfil
from almoxarifado.errors import ConfigError


def _escrever(tmp_path, conteudo):
    path = tmp_path / "perfis.json"
    path.write_text(conteudo if isinstance(conteudo, str) else json.dumps(conteudo), encoding="utf-8")
    return str(path)


def test_carregar_perfis(tmp_path):
    path = _escrever(tmp_path, {
        "perfis": [
            {"nome": "pecas", "estoque_url": " https://x.test/e.csv ", "cor_tema": "azul"},
            {"nome": "manutencao", "os_url": "1AbCdEf"},
        ]
    })
    perfis = carregar_perfis(path)
    assert list(perfis) == ["pecas", "manutencao"]
    assert perfis["pecas"] == FontesPerfil(nome="pecas", estoque_url="https://x.test/e.csv")
    assert perfis["manutencao"].os_url == "1AbCdEf"


def test_obter_perfil(tmp_path):
    path = _escrever(tmp_path, {"perfis": [{"nome": "pecas"}]})
    assert obter_perfil("pecas", path).nome == "pecas"
    with pytest.raises(ConfigError, match="pecas"):
        obter_perfil("outro", path)


@pytest.mark.parametrize(
    "conteudo",
    [
        "{nao e json",
        {"outra": []},
        {"perfis": {"nome": "x"}},
        {"perfis": [{"estoque_url": "https://x.test"}]},
        {"perfis": [{"nome": "  "}]},
    ],
)
def test_carregar_perfis_invalido(tmp_path, conteudo):
    with pytest.raises(ConfigError):
        carregar_perfis(_escrever(tmp_path, conteudo))


def test_carregar_perfis_arquivo_ausente(tmp_path):
    with pytest.raises(ConfigError):
        carregar_perfis(str(tmp_path / "nao_existe.json"))
