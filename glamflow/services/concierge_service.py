"""
Gemini text generation for cosmetic copy (booking confirmations, consultation
replies, look analysis).

Every call degrades to a canned string on any failure, including a missing
API key. Nothing in the booking path may wait on this service failing.
"""

import logging
from typing import Optional

import httpx

from ..config import GEMINI_API_KEY, GEMINI_API_URL, GEMINI_MODEL, GEMINI_TIMEOUT_SECONDS
from ..models import Appointment, Service

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "Thank you for choosing us! We look forward to pampering you."
CONSULTATION_FALLBACK = (
    "I would love to help! Based on your mood, a relaxing Signature Haircut or a "
    "Deep Tissue Massage would be perfect for you."
)
ANALYSIS_FALLBACK = (
    "Based on your features, our Balayage service would beautifully complement your skin tone."
)


def confirmation_fallback(appointment: Appointment, service_name: str) -> str:
    return (
        f"Booking confirmed! We are excited to see you on {appointment.date} "
        f"for your {service_name}."
    )


class ConciergeService:
    """generate(prompt, image) -> text, never raising"""

    def __init__(
        self,
        api_key: Optional[str] = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        timeout: float = GEMINI_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    async def generate(
        self,
        prompt: str,
        image_base64: Optional[str] = None,
        fallback: str = DEFAULT_FALLBACK,
        temperature: float = 0.7,
    ) -> str:
        if not self.api_key:
            logger.debug("GEMINI_API_KEY not configured - using fallback copy")
            return fallback

        parts: list[dict] = [{"text": prompt}]
        if image_base64:
            parts.append({"inline_data": {"mime_type": "image/jpeg", "data": image_base64}})

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{GEMINI_API_URL}/{self.model}:generateContent",
                    params={"key": self.api_key},
                    json={
                        "contents": [{"parts": parts}],
                        "generationConfig": {"temperature": temperature},
                    },
                )
            if response.status_code != 200:
                logger.warning(f"⚠️ Gemini returned HTTP {response.status_code}, using fallback")
                return fallback

            payload = response.json()
            text = payload["candidates"][0]["content"]["parts"][0].get("text", "").strip()
            return text or fallback
        except Exception as e:
            logger.warning(f"⚠️ Gemini call failed, using fallback: {e}")
            return fallback

    async def booking_confirmation(
        self, appointment: Appointment, service_name: str, staff_name: str
    ) -> str:
        prompt = (
            "Generate a short, professional booking confirmation.\n"
            f"Client: {appointment.clientName}\n"
            f"Service: {service_name}\n"
            f"Staff: {staff_name}\n"
            f"Date: {appointment.date} @ {appointment.time}\n"
            "Tone: Warm, welcoming, Filipino luxury. Under 50 words."
        )
        return await self.generate(
            prompt, fallback=confirmation_fallback(appointment, service_name)
        )

    async def consultation(self, user_input: str, services: list[Service]) -> str:
        services_list = ", ".join(f"{s.name} (₱{s.price:g})" for s in services)
        prompt = (
            f'Act as a luxury salon concierge. A client says: "{user_input}". '
            f"Available services: {services_list}. "
            "Recommend 1 or 2 best matches. Be warm and inviting. "
            "Filipino style but professional English. Under 80 words."
        )
        return await self.generate(prompt, fallback=CONSULTATION_FALLBACK, temperature=0.8)

    async def analyze_look(self, image_base64: str, services: list[Service]) -> str:
        names = ", ".join(s.name for s in services)
        prompt = (
            "Analyze this person's hair and skin features. Suggest one specific salon "
            f"service from: {names}. Explain why it suits them based on their facial "
            "features. Be professional, flattering, and concise (max 60 words)."
        )
        return await self.generate(prompt, image_base64=image_base64, fallback=ANALYSIS_FALLBACK)
