# almoxarifado/errors.py
"""
Exceções da aplicação.

O pipeline de sincronização não lança exceções (falhas viram listas
vazias); estas classes servem à camada de configuração e à CLI.
"""


class AlmoxarifadoError(Exception):
    """Erro base da aplicação."""


class ConfigError(AlmoxarifadoError):
    """Arquivo de perfis ausente, malformado ou perfil inexistente."""
