import logging
from typing import Any, Dict, Optional
import httpx

from ..settings import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the outbound email endpoint does not accept a message."""
    pass


class EmailService:
    """Sends templated emails through the EmailJS REST API"""
    
    def __init__(self, api_url: Optional[str] = None):
        self.api_url = api_url or settings.EMAILJS_API_URL
        self.service_id = settings.EMAILJS_SERVICE_ID
        self.template_id = settings.EMAILJS_TEMPLATE_ID
        self.public_key = settings.EMAILJS_PUBLIC_KEY
        self.private_key = settings.EMAILJS_PRIVATE_KEY
    
    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=30.0)
    
    async def send_template(self, template_params: Dict[str, Any], template_id: Optional[str] = None) -> None:
        payload = {
            "service_id": self.service_id,
            "template_id": template_id or self.template_id,
            "user_id": self.public_key,
            "accessToken": self.private_key,
            "template_params": template_params,
        }
        
        try:
            async with self._client() as client:
                response = await client.post(self.api_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Email endpoint unreachable: {e}")
            raise EmailDeliveryError(f"Error sending email: {e}")
        
        if response.status_code >= 400:
            logger.error(f"Email endpoint rejected message: {response.status_code} - {response.text}")
            raise EmailDeliveryError(f"Email endpoint failed: {response.text}")
    
    async def send_password_reset(self, to_email: str, reset_link: str) -> None:
        await self.send_template({"to_email": to_email, "reset_link": reset_link})
        logger.info(f"Sent password reset link to {to_email}")


def get_email_service() -> EmailService:
    return EmailService()
