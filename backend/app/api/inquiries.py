from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_inquiry_store, require_admin
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.core.logging import LogHelper
from app.core.security import TokenClaims
from app.schemas.inquiry import (
    InquiryCreate,
    InquiryListItem,
    InquiryListResponse,
    InquiryResponse,
    InquiryStats,
    InquiryStatusUpdate,
)
from app.services.inquiry_store import InquiryStore

router = APIRouter(prefix="/inquiries", tags=["inquiries"])

logger = LogHelper(__name__)


@router.post("", response_model=InquiryResponse, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    data: InquiryCreate,
    inquiries: Annotated[InquiryStore, Depends(get_inquiry_store)],
):
    """Submit an inquiry about a listing. Public endpoint."""
    inquiry = await inquiries.create(data)
    logger.info("Inquiry received", inquiry_id=inquiry.id, vehicle_id=inquiry.vehicle_id)
    return inquiry


@router.get("", response_model=InquiryListResponse)
async def list_inquiries(
    inquiries: Annotated[InquiryStore, Depends(get_inquiry_store)],
    _: Annotated[TokenClaims, Depends(require_admin)],
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    page: str | None = None,
    limit: str | None = None,
):
    result = await inquiries.list_page(
        status=status_filter,
        page=page,
        limit=limit,
        default_limit=settings.INQUIRY_DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )
    return InquiryListResponse(
        inquiries=[InquiryListItem.model_validate(row.to_dict()) for row in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/stats", response_model=InquiryStats)
async def inquiry_stats(
    inquiries: Annotated[InquiryStore, Depends(get_inquiry_store)],
    _: Annotated[TokenClaims, Depends(require_admin)],
):
    return InquiryStats(**await inquiries.count_by_status())


@router.get("/{inquiry_id}", response_model=InquiryResponse)
async def get_inquiry(
    inquiry_id: str,
    inquiries: Annotated[InquiryStore, Depends(get_inquiry_store)],
    _: Annotated[TokenClaims, Depends(require_admin)],
):
    inquiry = await inquiries.get(inquiry_id)
    if inquiry is None:
        raise NotFoundError("Inquiry")
    return inquiry


@router.put("/{inquiry_id}", response_model=InquiryResponse)
async def update_inquiry(
    inquiry_id: str,
    data: InquiryStatusUpdate,
    inquiries: Annotated[InquiryStore, Depends(get_inquiry_store)],
    claims: Annotated[TokenClaims, Depends(require_admin)],
):
    inquiry = await inquiries.update_status(inquiry_id, data.status)
    if inquiry is None:
        raise NotFoundError("Inquiry")
    logger.info("Inquiry status updated", inquiry_id=inquiry_id, status=inquiry.status, user_id=claims.user_id)
    return inquiry


@router.delete("/{inquiry_id}")
async def delete_inquiry(
    inquiry_id: str,
    inquiries: Annotated[InquiryStore, Depends(get_inquiry_store)],
    claims: Annotated[TokenClaims, Depends(require_admin)],
):
    if not await inquiries.delete(inquiry_id):
        raise NotFoundError("Inquiry")
    logger.info("Inquiry deleted", inquiry_id=inquiry_id, user_id=claims.user_id)
    return {"message": "Inquiry deleted successfully"}
