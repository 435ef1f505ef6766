"""Catalog router - services, staff, site settings and promo banner"""

import logging

from fastapi import APIRouter, Depends

from ...auth import require_admin
from ...dependencies import get_mirror, get_store
from ...models import Promo, Service, Staff
from ...store.base import RecordStore
from ...sync import MirrorState
from .schemas import PromoUpdate, SiteSettingsResponse
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Catalog"])


def get_catalog_service(
    mirror: MirrorState = Depends(get_mirror), store: RecordStore = Depends(get_store)
) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(mirror, store)


@router.get("/services", response_model=list[Service])
async def get_services(service: CatalogService = Depends(get_catalog_service)):
    return service.mirror.services


@router.get("/staff", response_model=list[Staff])
async def get_staff(service: CatalogService = Depends(get_catalog_service)):
    return service.mirror.staff


@router.get("/settings", response_model=SiteSettingsResponse)
async def get_settings(service: CatalogService = Depends(get_catalog_service)):
    """Site settings, built-in defaults until the settings document exists"""
    return service.get_settings()


@router.get("/promo", response_model=Promo)
async def get_promo(service: CatalogService = Depends(get_catalog_service)):
    return service.mirror.promo


@router.put("/promo", response_model=Promo)
async def update_promo(
    data: PromoUpdate,
    service: CatalogService = Depends(get_catalog_service),
    admin: dict = Depends(require_admin),
):
    logger.info(f"📢 Promo update by {admin.get('email')}")
    return await service.set_promo(data.message)
