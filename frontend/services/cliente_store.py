"""
Estado e ações de clientes do lado do frontend.
`ClienteState` guarda os dados; `ClienteStore` é o único ponto que os altera,
conversando com a API via httpx.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
import os

import httpx
from pydantic import ValidationError

from backend.models.cliente import Cliente, ClienteForm, ClienteListResponse
from backend.utils.documento_utils import DocumentoUtils

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8889/api/v1")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

DOCUMENTO_INVALIDO = "Documento inválido: informe um CPF ou CNPJ válido"
RESPOSTA_INVALIDA = "Resposta inesperada da API"

# Falhas de transporte e corpos 2xx fora do formato esperado
FALHAS_API = (httpx.HTTPError, ValidationError, ValueError)


class ClienteState:
    """Dados observados pela UI: lista, formulário e status da última ação."""

    def __init__(self):
        self._clientes: List[Cliente] = []
        self.form = ClienteForm()
        self.loading = False
        self.error: Optional[str] = None
        self.is_editing = False
        self.total_items = 0
        self.total_pages = 0
        self.current_page = 1
        self.items_per_page = 10

    @property
    def clientes(self) -> Tuple[Cliente, ...]:
        return tuple(self._clientes)


def _error_message(err: Exception) -> str:
    """Extrai `detail`/`message` da resposta da API, senão o texto da exceção."""
    if isinstance(err, httpx.HTTPStatusError):
        try:
            data = err.response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            detail = data.get("detail") or data.get("message")
            if detail:
                return str(detail)
    elif isinstance(err, ValueError):
        return RESPOSTA_INVALIDA
    return str(err) or "Erro desconhecido"


class ClienteStore:
    def __init__(self, client: httpx.AsyncClient, state: Optional[ClienteState] = None,
                 base_url: str = API_BASE_URL, logger=None):
        """
        Parâmetros:
            client (httpx.AsyncClient): cliente HTTP, o chamador controla o ciclo de vida
            state (ClienteState, opcional): estado persistente entre execuções da UI
            base_url (str): URL base da API, ex. http://localhost:8889/api/v1
            logger (logging.Logger, opcional): Logger para logs
        """
        self.client = client
        self.state = state if state is not None else ClienteState()
        self.base_url = base_url.rstrip("/")
        if logger is None:
            logger = logging.getLogger("cliente_store")
            logger.setLevel(logging.INFO)
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
            if not logger.hasHandlers():
                logger.addHandler(handler)
        self.logger = logger

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self.client.request(method, self._url(path), timeout=API_TIMEOUT, **kwargs)
        resp.raise_for_status()
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def _replace_local(self, cliente: Cliente) -> None:
        for i, current in enumerate(self.state._clientes):
            if current.id == cliente.id:
                self.state._clientes[i] = cliente
                return

    def _find_local(self, cliente_id: str) -> Optional[Cliente]:
        return next((c for c in self.state._clientes if c.id == cliente_id), None)

    def reset_form(self) -> None:
        self.state.form = ClienteForm()
        self.state.is_editing = False
        self.state.error = None

    async def start_edit(self, cliente_id: str) -> bool:
        """
        Carrega um cliente no formulário para edição (lista local ou GET /cliente/{id}).
        Retorno:
            bool: True se o cliente foi encontrado
        """
        cached = self._find_local(cliente_id)
        if cached is None:
            self.state.loading = True
            self.state.error = None
            try:
                cached = Cliente.model_validate(await self._request("GET", f"cliente/{cliente_id}"))
            except FALHAS_API as err:
                self.state.error = f"Erro ao carregar cliente: {_error_message(err)}"
                self.logger.error(f"Erro na requisição GET cliente_id={cliente_id}: {err}")
                return False
            finally:
                self.state.loading = False
        self.state.form = ClienteForm(**cached.model_dump())
        self.state.is_editing = True
        return True

    async def fetch_clientes(self, page: int = 1, limit: int = 10) -> None:
        self.state.loading = True
        self.state.error = None
        try:
            data = await self._request("GET", "cliente", params={"page": page, "limit": limit})
            listing = ClienteListResponse.model_validate(data)
            self.state._clientes = list(listing.clientes)
            self.state.total_items = listing.total_items
            self.state.total_pages = listing.total_pages
            self.state.current_page = listing.current_page
            self.state.items_per_page = listing.items_per_page
            self.logger.info(f"Clientes carregados: pagina={listing.current_page}/{listing.total_pages}, total={listing.total_items}")
        except FALHAS_API as err:
            self.state.error = f"Erro ao buscar clientes: {_error_message(err)}"
            self.logger.error(f"Erro na requisição GET: {err}")
        finally:
            self.state.loading = False

    async def save_cliente(self) -> bool:
        """
        Cria (POST) ou atualiza (PUT) o cliente do formulário.
        O documento é validado localmente antes de qualquer requisição.
        Retorno:
            bool: True em caso de sucesso
        """
        form = self.state.form
        if not DocumentoUtils.is_documento_valido(form.documento):
            self.state.error = DOCUMENTO_INVALIDO
            self.logger.warning(f"Documento inválido no formulário: documento={form.documento}")
            return False

        self.state.loading = True
        self.state.error = None
        payload: Dict[str, Any] = form.model_dump()
        payload["documento"] = DocumentoUtils.normalize_documento(form.documento)
        try:
            if self.state.is_editing and form.id is not None:
                saved = Cliente.model_validate(await self._request("PUT", f"cliente/{form.id}", json=payload))
                self._replace_local(saved)
            else:
                saved = Cliente.model_validate(await self._request("POST", "cliente", json=payload))
                self.state._clientes.append(saved)
            self.logger.info(f"Cliente salvo: id={saved.id}")
            self.reset_form()
            return True
        except FALHAS_API as err:
            self.state.error = f"Erro ao salvar cadastro: {_error_message(err)}"
            self.logger.error(f"Erro na requisição POST/PUT: {err}")
            return False
        finally:
            self.state.loading = False

    async def delete_cliente(self, cliente_id: str) -> bool:
        self.state.loading = True
        self.state.error = None
        try:
            await self._request("DELETE", f"cliente/{cliente_id}")
            self.state._clientes = [c for c in self.state._clientes if c.id != cliente_id]
            self.logger.info(f"Cliente removido: id={cliente_id}")
            return True
        except FALHAS_API as err:
            self.state.error = f"Erro ao excluir cliente: {_error_message(err)}"
            self.logger.error(f"Erro na requisição DELETE: {err}")
            return False
        finally:
            self.state.loading = False

    async def toggle_block_status(self, cliente_id: str) -> None:
        """Inverte `bloqueado` do cliente via PUT. Id desconhecido não faz nada."""
        self.state.loading = True
        self.state.error = None
        try:
            current = self._find_local(cliente_id)
            if current is None:
                return
            payload = current.model_dump()
            payload["bloqueado"] = not current.bloqueado
            updated = Cliente.model_validate(await self._request("PUT", f"cliente/{cliente_id}", json=payload))
            self._replace_local(updated)
            self.logger.info(f"Bloqueio alterado: id={cliente_id}, bloqueado={updated.bloqueado}")
        except FALHAS_API as err:
            self.state.error = f"Erro ao atualizar status de bloqueio: {_error_message(err)}"
            self.logger.error(f"Erro no toggle_block_status: {err}")
        finally:
            self.state.loading = False
