"""
Serviço de clientes: encapsula validação, normalização e persistência dos cadastros.
A validação de CPF/CNPJ é a mesma usada pelo frontend (DocumentoUtils).
"""
from typing import Dict, Any, Optional
import logging
import math

from fastapi import HTTPException
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from backend.models.cliente import Cliente, ClienteListResponse
from backend.mongo.db import get_clientes_collection
from backend.utils.documento_utils import DocumentoUtils


class ClienteService:
    def __init__(self, logger=None):
        """
        Inicializa o serviço de clientes.
        Parâmetros:
            logger (logging.Logger, opcional): Logger para logs
        """
        if logger is None:
            logger = logging.getLogger("cliente_service")
            logger.setLevel(logging.INFO)
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
            if not logger.hasHandlers():
                logger.addHandler(handler)
        self.logger = logger

    @staticmethod
    def _to_cliente(doc: Dict[str, Any]) -> Cliente:
        return Cliente(
            id=str(doc["_id"]),
            nome=doc.get("nome", ""),
            documento=doc.get("documento", ""),
            telefone=doc.get("telefone", ""),
            bloqueado=bool(doc.get("bloqueado", False)),
        )

    def _object_id(self, cliente_id: str) -> ObjectId:
        if not ObjectId.is_valid(cliente_id):
            self.logger.warning(f"cliente_id inválido: {cliente_id}")
            raise HTTPException(status_code=400, detail="cliente_id inválido")
        return ObjectId(cliente_id)

    def _validate_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Valida e normaliza o corpo de criação/atualização.
        Parâmetros:
            payload (dict): dados do cliente
        Retorno:
            dict: documento pronto para persistência (sem _id)
        """
        nome = payload.get("nome")
        documento = payload.get("documento")
        telefone = payload.get("telefone", "")
        if telefone is None:
            telefone = ""
        bloqueado = payload.get("bloqueado", False)
        if not isinstance(nome, str) or not nome.strip() or not isinstance(documento, str) or not documento.strip():
            self.logger.warning(f"Payload incompleto: {payload}")
            raise HTTPException(status_code=400, detail="Campos obrigatórios: nome, documento")
        if not isinstance(telefone, str):
            self.logger.warning(f"telefone não textual: telefone={telefone}")
            raise HTTPException(status_code=400, detail="telefone deve ser texto")
        if not isinstance(bloqueado, bool):
            self.logger.warning(f"bloqueado não booleano: bloqueado={bloqueado}")
            raise HTTPException(status_code=400, detail="bloqueado deve ser booleano")

        # Normalização e validação crítica do documento
        doc_norm = DocumentoUtils.normalize_documento(documento)
        if not DocumentoUtils.is_documento_valido(doc_norm):
            self.logger.warning(f"Documento inválido detectado: documento={doc_norm}")
            raise HTTPException(status_code=422, detail="Documento inválido (CPF/CNPJ com dígitos verificadores ou tamanho incorretos)")

        return {"nome": nome.strip(), "documento": doc_norm, "telefone": telefone.strip(), "bloqueado": bloqueado}

    async def _ensure_documento_livre(self, coll, documento: str, ignore_id: Optional[ObjectId] = None) -> None:
        query: Dict[str, Any] = {"documento": documento}
        if ignore_id is not None:
            query["_id"] = {"$ne": ignore_id}
        if await coll.find_one(query):
            self.logger.warning(f"Documento já cadastrado: documento={documento}")
            raise HTTPException(status_code=409, detail="Documento já cadastrado para outro cliente")

    async def list_clientes(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """
        Lista clientes paginados, ordenados por nome.
        Parâmetros:
            page (int): página, a partir de 1
            limit (int): itens por página
        Retorno:
            dict: ClienteListResponse serializado (camelCase)
        """
        coll = get_clientes_collection()
        total = await coll.count_documents({})
        clientes = []
        async for doc in coll.find({}).sort("nome", 1).skip((page - 1) * limit).limit(limit):
            clientes.append(self._to_cliente(doc))
        result = ClienteListResponse(
            clientes=clientes,
            total_items=total,
            total_pages=math.ceil(total / limit) if total else 0,
            current_page=page,
            items_per_page=limit,
        )
        self.logger.info(f"Listando clientes: page={page}, limit={limit}, total={total}")
        return result.model_dump(by_alias=True)

    async def get_cliente(self, cliente_id: str) -> Dict[str, Any]:
        obj_id = self._object_id(cliente_id)
        doc = await get_clientes_collection().find_one({"_id": obj_id})
        if not doc:
            self.logger.warning(f"Cliente não encontrado: cliente_id={cliente_id}")
            raise HTTPException(status_code=404, detail="Cliente não encontrado")
        return self._to_cliente(doc).model_dump()

    async def create_cliente(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Cria um cliente: valida dados, garante documento único e persiste.
        Parâmetros:
            payload (dict): dados do cliente
        Retorno:
            dict: cliente criado, com id
        """
        self.logger.info(f"Recebendo payload de cliente: {payload}")
        data = self._validate_payload(payload)
        coll = get_clientes_collection()
        await self._ensure_documento_livre(coll, data["documento"])
        try:
            res = await coll.insert_one(dict(data))
        except DuplicateKeyError:
            self.logger.warning(f"Documento já cadastrado (índice único): documento={data['documento']}")
            raise HTTPException(status_code=409, detail="Documento já cadastrado para outro cliente")
        created = await coll.find_one({"_id": res.inserted_id})
        self.logger.info(f"Cliente criado: {created}")
        return self._to_cliente(created).model_dump()

    async def update_cliente(self, cliente_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Atualiza todos os campos de um cliente existente. O id do corpo é ignorado.
        Parâmetros:
            cliente_id (str): ID do cliente
            payload (dict): dados do cliente
        Retorno:
            dict: cliente atualizado
        """
        self.logger.info(f"Atualizando cliente: cliente_id={cliente_id}, payload={payload}")
        obj_id = self._object_id(cliente_id)
        data = self._validate_payload(payload)
        coll = get_clientes_collection()
        if not await coll.find_one({"_id": obj_id}):
            self.logger.warning(f"Cliente não encontrado para atualização: cliente_id={cliente_id}")
            raise HTTPException(status_code=404, detail="Cliente não encontrado")
        await self._ensure_documento_livre(coll, data["documento"], ignore_id=obj_id)
        try:
            res = await coll.update_one({"_id": obj_id}, {"$set": data})
        except DuplicateKeyError:
            self.logger.warning(f"Documento já cadastrado (índice único): documento={data['documento']}")
            raise HTTPException(status_code=409, detail="Documento já cadastrado para outro cliente")
        updated = await coll.find_one({"_id": obj_id}) if res.matched_count else None
        if updated is None:
            self.logger.warning(f"Cliente removido durante a atualização: cliente_id={cliente_id}")
            raise HTTPException(status_code=404, detail="Cliente não encontrado")
        self.logger.info(f"Cliente atualizado: {updated}")
        return self._to_cliente(updated).model_dump()

    async def delete_cliente(self, cliente_id: str) -> None:
        obj_id = self._object_id(cliente_id)
        res = await get_clientes_collection().delete_one({"_id": obj_id})
        if res.deleted_count == 0:
            self.logger.warning(f"Cliente não encontrado para remoção: cliente_id={cliente_id}")
            raise HTTPException(status_code=404, detail="Cliente não encontrado")
        self.logger.info(f"Cliente removido: cliente_id={cliente_id}")
