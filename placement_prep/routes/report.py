from fastapi import APIRouter, Depends

from ..dependencies import get_report_aggregator
from ..models.report import UserReport
from ..models.user import User
from ..services import ReportAggregator
from ..utils.security import get_current_user

router = APIRouter(prefix="/api/report", tags=["report"])


@router.get("", response_model=UserReport)
async def user_report(
    current_user: User = Depends(get_current_user),
    report_aggregator: ReportAggregator = Depends(get_report_aggregator)
):
    """
    Aggregated practice statistics for the authenticated user
    """
    return await report_aggregator.build_report(current_user.id)
