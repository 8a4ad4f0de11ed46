"""
Modelos de Cliente compartilhados entre a API e o frontend.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClienteForm(BaseModel):
    """
    Dados editáveis de um cliente. `id` é None enquanto o registro não foi salvo.
    """
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    id: Optional[str] = None
    nome: str = ""  # Nome/Razão Social
    documento: str = ""  # CPF/CNPJ (somente números depois de salvo)
    telefone: str = ""
    bloqueado: bool = False


class Cliente(ClienteForm):
    id: str


class ClienteListResponse(BaseModel):
    """Página da listagem de clientes, no formato usado pela API."""
    model_config = ConfigDict(populate_by_name=True)

    clientes: List[Cliente] = Field(default_factory=list)
    total_items: int = Field(0, alias="totalItems")
    total_pages: int = Field(0, alias="totalPages")
    current_page: int = Field(1, alias="currentPage")
    items_per_page: int = Field(10, alias="itemsPerPage")
