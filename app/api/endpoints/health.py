from fastapi import APIRouter, status

from app.schemas.health import HealthCheck

router = APIRouter()
group_tags = ["Health"]


@router.get(
    "/health",
    tags=group_tags,
    response_model=HealthCheck,
    status_code=status.HTTP_200_OK,
)
def get_health() -> HealthCheck:
    return HealthCheck(status="ok")
