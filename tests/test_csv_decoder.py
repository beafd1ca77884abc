from almoxarifado.adapters.csv_decoder import decodificar, detectar_delimitador, dividir_linha


def test_detecta_ponto_e_virgula_pela_contagem():
    texto = "a;b;c;d\n1;2;3,5;4\n5;6;7;8,1\n"
    # 9 ';' contra 2 ','
    assert detectar_delimitador(texto) == ";"


def test_detecta_virgula():
    texto = "a,b,c\n1,2,3\n4,5,6\n"
    assert detectar_delimitador(texto) == ","


def test_empate_fica_com_ponto_e_virgula():
    assert detectar_delimitador("a;b,c") == ";"
    assert detectar_delimitador("") == ";"


def test_linha_longa_sem_separadores_nao_conta():
    titulo = "Relatório de controle do almoxarifado central, revisão de março"
    # sem ignorar o título as vírgulas venceriam (3 x 2)
    texto = f"{titulo}\ncod;obs\n01;a,b,c\n"
    assert detectar_delimitador(texto) == ";"


def test_dividir_linha_respeita_aspas():
    assert dividir_linha('1;"Parafuso; sextavado";2', ";") == ["1", "Parafuso; sextavado", "2"]


def test_dividir_linha_aspas_escapadas():
    assert dividir_linha('"Tubo 1/2"" PVC",3', ",") == ['Tubo 1/2" PVC', "3"]


def test_dividir_linha_apara_celulas():
    assert dividir_linha(" a ; b ;  ", ";") == ["a", "b", ""]


def test_aspas_sem_fechamento_consomem_resto_da_linha():
    assert dividir_linha('1;"abc;def', ";") == ["1", "abc;def"]


def test_decodificar_descarta_linhas_vazias_e_bom():
    texto = "\ufeffcod;desc\r\n\r\n   \n01;Luva\r02;Bota\n"
    assert decodificar(texto) == [["cod", "desc"], ["01", "Luva"], ["02", "Bota"]]


def test_decodificar_campo_com_quebra_de_linha():
    texto = 'cod;obs\n01;"linha um\nlinha dois"\n02;ok\n'
    linhas = decodificar(texto)
    assert linhas == [["cod", "obs"], ["01", "linha um\nlinha dois"], ["02", "ok"]]


def test_decodificar_aspa_solta_nao_engole_o_arquivo():
    texto = 'cod;obs\n01;"sem fim\n02;ok\n03;ok\n'
    linhas = decodificar(texto)
    assert len(linhas) == 4
    assert linhas[1] == ["01", "sem fim"]


def test_decodificar_vazio():
    assert decodificar("") == []
    assert decodificar(None) == []


def test_aspas_no_meio_do_campo_sao_texto():
    assert dividir_linha('01;Tubo 1/2";5', ";") == ["01", 'Tubo 1/2"', "5"]


def test_marcas_de_polegada_nao_juntam_linhas():
    texto = 'cod;desc;qtd\n01;Tubo 1/2";5\n02;Luva;3\n03;Bota;2\n04;Cano 3/4";7\n05;Fita;1\n'
    linhas = decodificar(texto)
    assert [l[0] for l in linhas[1:]] == ["01", "02", "03", "04", "05"]
    assert linhas[1] == ["01", 'Tubo 1/2"', "5"]
    assert linhas[4] == ["04", 'Cano 3/4"', "7"]


def test_aspa_solta_nao_se_junta_a_aspas_de_outra_linha():
    # a aspa de "03" fecha no meio do campo: nada é juntado
    texto = 'cod;obs\n01;"sem fim\n02;ok\n03;"x"y\n04;ok\n'
    linhas = decodificar(texto)
    assert [l[0] for l in linhas[1:]] == ["01", "02", "03", "04"]
    assert linhas[1] == ["01", "sem fim"]
    assert linhas[2] == ["02", "ok"]
