"""
Reports router: portfolio summary for the dashboard.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from costbook.db.session import get_db
from costbook.schemas.report import ReportSummaryResponse
from costbook.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummaryResponse)
def get_report_summary(db: Session = Depends(get_db)):
    """
    Summary figures across all recipes and ingredients.

    - Average margin over recipes with a positive cost per serving
    - Highest-margin recipe and count of low-margin recipes
    - Five most expensive ingredients by unit cost
    - Recipe count per category
    """
    summary = ReportService(db).summary()
    return ReportSummaryResponse.model_validate(summary)
