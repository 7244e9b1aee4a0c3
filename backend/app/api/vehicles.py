from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_claims, get_listing_store, get_stores, require_admin
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.core.logging import LogHelper
from app.core.security import TokenClaims
from app.schemas.inquiry import InquiryResponse
from app.schemas.vehicle import VehicleCreate, VehicleListResponse, VehicleResponse, VehicleUpdate
from app.services import query_engine
from app.services.listing_store import ListingStore
from app.services.stores import Stores

router = APIRouter(prefix="/vehicles", tags=["vehicles"])

logger = LogHelper(__name__)


@router.get("", response_model=list[VehicleResponse] | VehicleListResponse)
async def list_vehicles(
    listings: Annotated[ListingStore, Depends(get_listing_store)],
    page: str | None = None,
    limit: str | None = None,
    brand: str | None = None,
    min_price: Annotated[str | None, Query(alias="minPrice")] = None,
    max_price: Annotated[str | None, Query(alias="maxPrice")] = None,
    min_year: Annotated[str | None, Query(alias="minYear")] = None,
    max_year: Annotated[str | None, Query(alias="maxYear")] = None,
    min_mileage: Annotated[str | None, Query(alias="minMileage")] = None,
    max_mileage: Annotated[str | None, Query(alias="maxMileage")] = None,
    fuel_type: Annotated[str | None, Query(alias="fuelType")] = None,
    q: str | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    order: str | None = None,
):
    """
    List vehicles.

    Without any query parameter the full list is returned as a bare array,
    newest first. Any parameter switches to the paginated envelope
    ``{vehicles, total, page, limit, totalPages}``. Parameters are accepted
    as raw strings; malformed values are ignored rather than rejected.
    """
    params = {
        "page": page,
        "limit": limit,
        "brand": brand,
        "minPrice": min_price,
        "maxPrice": max_price,
        "minYear": min_year,
        "maxYear": max_year,
        "minMileage": min_mileage,
        "maxMileage": max_mileage,
        "fuelType": fuel_type,
        "q": q,
        "sortBy": sort_by,
        "order": order,
    }
    vehicles = await listings.list_all()

    if not query_engine.has_query_params(params):
        ordered = query_engine.sort_records(vehicles, query_engine.DEFAULT_SORT_FIELD, query_engine.DEFAULT_ORDER)
        return [VehicleResponse.model_validate(v) for v in ordered]

    listing_query = query_engine.ListingQuery.from_params(
        params,
        default_limit=settings.LISTING_DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )
    result = query_engine.query(vehicles, listing_query)
    return VehicleListResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: str,
    listings: Annotated[ListingStore, Depends(get_listing_store)],
):
    vehicle = await listings.get(vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle")
    return vehicle


@router.get("/{vehicle_id}/inquiries", response_model=list[InquiryResponse])
async def list_vehicle_inquiries(
    vehicle_id: str,
    stores: Annotated[Stores, Depends(get_stores)],
    _: Annotated[TokenClaims, Depends(require_admin)],
):
    if not await stores.listings.exists(vehicle_id):
        raise NotFoundError("Vehicle")
    return await stores.inquiries.list_by_vehicle(vehicle_id)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    data: VehicleCreate,
    listings: Annotated[ListingStore, Depends(get_listing_store)],
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
):
    vehicle = await listings.insert(data)
    logger.info("Vehicle created", vehicle_id=vehicle.id, user_id=claims.user_id)
    return vehicle


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: str,
    data: VehicleUpdate,
    listings: Annotated[ListingStore, Depends(get_listing_store)],
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
):
    vehicle = await listings.update(vehicle_id, data)
    if vehicle is None:
        raise NotFoundError("Vehicle")
    logger.info("Vehicle updated", vehicle_id=vehicle_id, user_id=claims.user_id)
    return vehicle


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: str,
    listings: Annotated[ListingStore, Depends(get_listing_store)],
    claims: Annotated[TokenClaims, Depends(require_admin)],
):
    if not await listings.delete(vehicle_id):
        raise NotFoundError("Vehicle")
    logger.info("Vehicle deleted", vehicle_id=vehicle_id, user_id=claims.user_id)
    return {"message": "Vehicle deleted successfully"}
