from fastapi import APIRouter, Depends

from credential_service.depends import Services, get_services

router = APIRouter()


@router.get("/health")
async def health_check(services: Services = Depends(get_services)):
    return {
        "status": "ok",
        "database": "ready" if services.database.is_ready else "unavailable",
    }
