"""Report API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from hirevo.api.dependencies import Store
from hirevo.api.schemas import CompanyReportResponse, ErrorResponse, UserReportResponse
from hirevo.models import CompanyReport, UserReport
from hirevo.reports import CompanyReportAggregator, UserReportAggregator

router = APIRouter(prefix="/reports", tags=["reports"])

RecordId = Annotated[str, Path(min_length=1, max_length=32)]


@router.get(
    "/companies/{company_id}",
    response_model=CompanyReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_company_report(store: Store, company_id: RecordId) -> CompanyReportResponse:
    """Get the stored report of a company."""
    report = await store.find_first_by_filter(
        CompanyReport, CompanyReport.company_id == company_id
    )
    return CompanyReportResponse.model_validate(report)


@router.post(
    "/companies/{company_id}/recompute",
    response_model=CompanyReportResponse,
    status_code=status.HTTP_200_OK,
    responses={500: {"model": ErrorResponse}},
)
async def recompute_company_report(
    store: Store, company_id: RecordId
) -> CompanyReportResponse:
    """Recompute a company report from its current sources."""
    report = await CompanyReportAggregator(store).recompute(company_id)
    return CompanyReportResponse.model_validate(report)


@router.get(
    "/users/{user_id}",
    response_model=UserReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user_report(store: Store, user_id: RecordId) -> UserReportResponse:
    """Get the stored report of a user."""
    report = await store.find_first_by_filter(UserReport, UserReport.user_id == user_id)
    return UserReportResponse.model_validate(report)


@router.post(
    "/users/{user_id}/recompute",
    response_model=UserReportResponse,
    status_code=status.HTTP_200_OK,
    responses={500: {"model": ErrorResponse}},
)
async def recompute_user_report(store: Store, user_id: RecordId) -> UserReportResponse:
    """Recompute a user report from its current sources."""
    report = await UserReportAggregator(store).recompute(user_id)
    return UserReportResponse.model_validate(report)
