from fastapi import APIRouter

from certgateway.api.routes import certificados, utils

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(certificados.router)
