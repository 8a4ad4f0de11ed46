from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
import logging
import os


logger = logging.getLogger(__name__)

# ====== Conexão MongoDB (motor) ======
_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_db: Optional[AsyncIOMotorDatabase] = None

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "cadastros_db")

async def connect_to_mongo() -> None:
	global _mongo_client, _mongo_db
	if _mongo_client is None:
		logger.info(f"Conectando ao MongoDB: db={MONGO_DB_NAME}")
		_mongo_client = AsyncIOMotorClient(MONGO_URI)
		_mongo_db = _mongo_client[MONGO_DB_NAME]

async def close_mongo_connection() -> None:
	global _mongo_client, _mongo_db
	if _mongo_client is not None:
		_mongo_client.close()
		_mongo_client = None
		_mongo_db = None

def get_db() -> AsyncIOMotorDatabase:
	if _mongo_db is None:
		raise RuntimeError("MongoDB nao inicializado. Chame connect_to_mongo no startup da API.")
	return _mongo_db

def get_collection(name: str) -> AsyncIOMotorCollection:
	return get_db()[name]

CLIENTES_COLLECTION = "clientes"

def get_clientes_collection() -> AsyncIOMotorCollection:
	return get_collection(CLIENTES_COLLECTION)

async def ensure_indexes() -> None:
	"""Índice único em `documento`: dois clientes não compartilham CPF/CNPJ."""
	await get_clientes_collection().create_index("documento", unique=True)
	logger.info(f"Índices garantidos na coleção {CLIENTES_COLLECTION}")
