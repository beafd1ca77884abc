from almoxarifado.adapters.schema import (
    COLUNA_AUSENTE,
    Cabecalho,
    Campo,
    celula,
    encontrar_coluna,
    localizar_cabecalho,
    resolver_colunas,
)


def test_localizar_cabecalho_pula_titulos():
    linhas = [
        ["CONTROLE DE ESTOQUE", ""],
        ["", ""],
        ["Código", "Descrição"],
        ["01", "Luva"],
    ]
    cab = localizar_cabecalho(linhas, ["cod"])
    assert cab.encontrado
    assert cab.indice == 2
    assert cab.colunas == ["codigo", "descricao"]


def test_localizar_cabecalho_respeita_limite():
    linhas = [["x"]] * 20 + [["codigo"]]
    assert not localizar_cabecalho(linhas, ["cod"]).encontrado
    assert localizar_cabecalho(linhas, ["cod"], limite=21).indice == 20


def test_primeiro_termo_vence():
    colunas = ["quantidade", "saldo"]
    assert encontrar_coluna(colunas, ["saldo", "quant"]) == 1
    assert encontrar_coluna(colunas, ["quant", "saldo"]) == 0


def test_termo_curto_so_casa_exato():
    assert encontrar_coluna(["numero os", "os"], ["os"]) == 1
    assert encontrar_coluna(["numero os"], ["os"]) == COLUNA_AUSENTE


def test_evitar_descarta_coluna():
    colunas = ["valor total", "valor unitario"]
    assert encontrar_coluna(colunas, ["valor"], evitar=["total"]) == 1


def test_encontrar_coluna_normaliza_cabecalho_bruto():
    assert encontrar_coluna(["Cód.", "DESCRIÇÃO"], ["descricao"]) == 1


def test_resolver_colunas():
    cab = Cabecalho(indice=0, colunas=["codigo", "descricao"])
    campos = [Campo("codigo", ("codigo",)), Campo("preco", ("preco",))]
    assert resolver_colunas(cab, campos) == {"codigo": 0, "preco": COLUNA_AUSENTE}


def test_celula():
    linha = ["a", ""]
    assert celula(linha, 0) == "a"
    assert celula(linha, 1, "N/D") == "N/D"
    assert celula(linha, 5, "x") == "x"
    assert celula(linha, COLUNA_AUSENTE) == ""
