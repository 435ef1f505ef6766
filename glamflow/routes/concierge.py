"""AI concierge endpoints - consultation replies and look analysis"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..dependencies import get_concierge, get_mirror
from ..rate_limiter import create_rate_limiter
from ..services.concierge_service import ConciergeService
from ..sync import MirrorState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/concierge", tags=["Concierge"])

rate_limit_concierge = create_rate_limiter(limit=10, window_seconds=60, key_prefix="concierge")


class ConsultRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)


class AnalyzeRequest(BaseModel):
    image: str = Field(..., min_length=1, description="Base64-encoded JPEG")


class ConciergeReply(BaseModel):
    reply: str


@router.post("/consult", response_model=ConciergeReply)
async def consult(
    data: ConsultRequest,
    concierge: ConciergeService = Depends(get_concierge),
    mirror: MirrorState = Depends(get_mirror),
    _: None = Depends(rate_limit_concierge),
):
    """Recommend services for a free-text mood or request"""
    return ConciergeReply(reply=await concierge.consultation(data.message, mirror.services))


@router.post("/analyze", response_model=ConciergeReply)
async def analyze(
    data: AnalyzeRequest,
    concierge: ConciergeService = Depends(get_concierge),
    mirror: MirrorState = Depends(get_mirror),
    _: None = Depends(rate_limit_concierge),
):
    """Suggest one service from a photo"""
    image = data.image.split(",", 1)[1] if data.image.startswith("data:") else data.image
    return ConciergeReply(reply=await concierge.analyze_look(image, mirror.services))
