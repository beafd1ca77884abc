# almoxarifado/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os registros são recriados a cada ciclo de sincronização; nenhum deles
  é atualizado no lugar. A reconciliação devolve cópias (`dataclasses.replace`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

TIPO_ENTRADA = "entrada"
TIPO_SAIDA = "saida"


@dataclass
class ItemEstoque:
    """Item do estoque (identidade = código normalizado)."""
    codigo: str
    descricao: str = ""
    equipamento: str = "N/D"
    localizacao: str = ""
    fornecedor: str = ""
    quantidade_atual: float = 0.0    # negativos da planilha passam adiante
    quantidade_minima: float = 0.0
    unidade: str = "un"              # un | mt | pç | kg | lt | 2 letras
    categoria: str = "Geral"
    valor_unitario: float = 0.0
    valor_total: float = 0.0
    entradas: float = 0.0            # preenchido pela reconciliação
    saidas: float = 0.0              # preenchido pela reconciliação
    ultima_movimentacao: Optional[datetime] = None

    @property
    def id(self) -> str:
        return self.codigo


@dataclass
class Movimento:
    """Movimentação de estoque (entrada ou saída)."""
    id: str                          # "{tipo}-{linha}", não estável entre recargas
    data: datetime
    codigo: str
    quantidade: float
    tipo: str                        # 'entrada' | 'saida'
    fornecedor: Optional[str] = None
    responsavel: Optional[str] = None
    valor_unitario: Optional[float] = None
    valor_total: Optional[float] = None
    setor: Optional[str] = None
    perfil: Optional[str] = None
    cor: Optional[str] = None
    motivo: Optional[str] = None
    turno: Optional[str] = None


@dataclass
class OrdemServico:
    """Ordem de serviço de manutenção."""
    id: str                          # "os-{linha}"
    numero: str
    data_abertura: datetime
    data_inicio: Optional[datetime] = None
    data_fim: Optional[datetime] = None
    profissional: str = ""           # pode conter vários nomes separados por '/'
    equipamento: str = ""
    setor: str = ""
    status: str = ""
    horas: float = 0.0
    descricao: str = ""
    parada: str = "Não"              # 'Sim' | 'Não'
    natureza: str = ""

    @property
    def profissionais(self) -> List[str]:
        return [p.strip() for p in self.profissional.split("/") if p.strip()]


@dataclass
class Snapshot:
    """Resultado completo de um ciclo de sincronização."""
    itens: List[ItemEstoque] = field(default_factory=list)
    movimentos: List[Movimento] = field(default_factory=list)
    ordens: List[OrdemServico] = field(default_factory=list)
    erro_sincronizacao: bool = False
    atualizado_em: Optional[datetime] = None
