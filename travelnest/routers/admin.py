from fastapi import APIRouter, Depends

from travelnest.deps import require_admin
from travelnest.schemas import AdminStats
from travelnest.stats import collect_admin_stats

router = APIRouter(tags=["admin"])


@router.get(
    "/admin-stat",
    response_model=AdminStats,
    dependencies=[Depends(require_admin)],
)
async def admin_stats() -> AdminStats:
    return await collect_admin_stats()
