from typing import Dict, Any
from fastapi import FastAPI, status, Query
import logging
import uvicorn
import os
from backend.mongo.db import connect_to_mongo, close_mongo_connection, ensure_indexes
from backend.api.services.cliente_service import ClienteService

logger = logging.getLogger(__name__)

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8889"))

app = FastAPI(title="Cadastro de Clientes API", version="1.0.0")

cliente_service = ClienteService()


# Conexão MongoDB no ciclo de vida da aplicação
@app.on_event("startup")
async def on_startup() -> None:
    """
    Evento de inicialização da API.
    Conecta ao MongoDB e garante os índices da coleção de clientes.
    """
    logger.info("Iniciando evento de startup da API")
    await connect_to_mongo()
    await ensure_indexes()
    logger.info("Conexão com MongoDB estabelecida")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    logger.info("Iniciando evento de shutdown da API")
    await close_mongo_connection()
    logger.info("Conexão com MongoDB encerrada")


@app.get("/")
async def root() -> dict:
    """
    Endpoint de status da API.
    Retorno:
        dict: status da API
    """
    return {"status": "ok"}


# Endpoints Cliente (prefixo /api/v1)
#########
@app.get("/api/v1/cliente")
async def list_clientes(page: int = Query(1, ge=1), limit: int = Query(10, ge=1, le=100)) -> Dict[str, Any]:
    """
    Lista clientes paginados.
    Parâmetros:
        page (int): página, a partir de 1
        limit (int): itens por página (1 a 100)
    Retorno:
        dict: clientes, totalItems, totalPages, currentPage, itemsPerPage
    """
    return await cliente_service.list_clientes(page, limit)


#########
@app.get("/api/v1/cliente/{cliente_id}")
async def get_cliente(cliente_id: str) -> Dict[str, Any]:
    logger.info(f"Consulta de cliente: cliente_id={cliente_id}")
    return await cliente_service.get_cliente(cliente_id)


#########
@app.post("/api/v1/cliente", status_code=status.HTTP_201_CREATED)
async def create_cliente(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Cria um cliente. Documento (CPF/CNPJ) é normalizado e validado.
    Parâmetros:
        payload (dict): nome, documento, telefone, bloqueado
    Retorno:
        dict: cliente criado
    """
    result = await cliente_service.create_cliente(payload)
    logger.info(f"Cliente criado: retorno={result}")
    return result


#########
@app.put("/api/v1/cliente/{cliente_id}")
async def update_cliente(cliente_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Atualiza um cliente (inclusive o status de bloqueio).
    Parâmetros:
        cliente_id (str): ID do cliente
        payload (dict): nome, documento, telefone, bloqueado
    Retorno:
        dict: cliente atualizado
    """
    result = await cliente_service.update_cliente(cliente_id, payload)
    logger.info(f"Cliente atualizado: retorno={result}")
    return result


#########
@app.delete("/api/v1/cliente/{cliente_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cliente(cliente_id: str) -> None:
    logger.info(f"Solicitação de remoção de cliente: cliente_id={cliente_id}")
    await cliente_service.delete_cliente(cliente_id)
    return None


######### ------------------------------ #########
if __name__ == "__main__":
    """
    Inicializa o servidor Uvicorn para rodar a API.
    """
    logging.basicConfig(level=logging.INFO)
    logger.info(f"Starting Uvicorn server on {API_HOST}:{API_PORT}")
    uvicorn.run(app, host=API_HOST, port=API_PORT)
