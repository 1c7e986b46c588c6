"""
Keycloak client acting as the identity provider.

Covers the account operations the admin panel needs: lookup by email,
sign-up and admin-side creation, deletion, password reset links and
resolving a bearer token to the signed-in user.
"""

import os
import time
import logging
from typing import Dict, Any, Optional
from urllib.parse import urlencode
import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Seconds before expiry at which the admin token is renewed
TOKEN_EXPIRY_MARGIN = 10


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects or fails a request."""
    pass


class UserNotFoundError(IdentityProviderError):
    def __init__(self, email: str):
        super().__init__(f"No account for {email}")
        self.email = email


class UserExistsError(IdentityProviderError):
    def __init__(self, email: str):
        super().__init__(f"Account already exists: {email}")
        self.email = email


class IdentityUser(BaseModel):
    """Account as returned by the identity provider."""
    id: str = Field(..., description="Provider user id (uid)")
    email: str = Field(..., description="Verified email address")
    enabled: bool = Field(True, description="Whether user is enabled")


class KeycloakAdminClient:
    """
    Keycloak Admin REST API client for user management operations.
    """
    
    def __init__(self):
        """Initialize Keycloak admin client with environment configuration."""
        self.server_url = os.environ.get("KEYCLOAK_SERVER_URL", "http://localhost:8180").rstrip("/")
        self.realm = os.environ.get("KEYCLOAK_REALM", "edutoolkit")
        self.admin_username = os.environ.get("KEYCLOAK_ADMIN", "admin")
        self.admin_password = os.environ.get("KEYCLOAK_ADMIN_PASSWORD", "admin_password")
        self.client_id = os.environ.get("KEYCLOAK_CLIENT_ID", "edutoolkit-panel")
        self._access_token = None
        self._token_expires_at = 0.0
        self.verify_ssl = True
    
    @property
    def users_url(self) -> str:
        return f"{self.server_url}/admin/realms/{self.realm}/users"
    
    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(verify=self.verify_ssl, timeout=30.0)
    
    async def _get_admin_token(self) -> str:
        """Get admin access token for Keycloak API operations."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token
        
        token_url = f"{self.server_url}/realms/master/protocol/openid-connect/token"
        
        data = {
            "grant_type": "password",
            "username": self.admin_username,
            "password": self.admin_password,
            "client_id": "admin-cli",
            "scope": "openid"
        }
        
        try:
            async with self._client() as client:
                response = await client.post(
                    token_url,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"}
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise IdentityProviderError(f"Identity provider unreachable: {e}")
        
        if response.status_code != 200:
            logger.error(f"Failed to get admin token: {response.status_code} - {response.text}")
            raise IdentityProviderError(f"Admin login failed with status {response.status_code}")
        
        payload = response.json()
        self._access_token = payload["access_token"]
        self._token_expires_at = time.monotonic() + payload.get("expires_in", 60) - TOKEN_EXPIRY_MARGIN
        return self._access_token
    
    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self._send(method, url, **kwargs)
        if response.status_code == 401:
            # Token revoked or expired early on the server side
            logger.info("Admin token rejected, requesting a new one")
            self._access_token = None
            response = await self._send(method, url, **kwargs)
        return response
    
    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        token = await self._get_admin_token()
        headers = dict(kwargs.pop("headers", {}))
        headers["Authorization"] = f"Bearer {token}"
        try:
            async with self._client() as client:
                return await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider request {method} {url} failed: {e}")
            raise IdentityProviderError(f"Identity provider unreachable: {e}")
    
    async def get_user_by_email(self, email: str) -> Optional[IdentityUser]:
        response = await self._request(
            "GET", self.users_url,
            params={"email": email, "exact": "true"}
        )
        if response.status_code != 200:
            logger.error(f"Failed to look up user: {response.status_code} - {response.text}")
            raise IdentityProviderError(f"User lookup failed with status {response.status_code}")
        
        users = response.json()
        if not users:
            return None
        return IdentityUser(id=users[0]["id"], email=users[0].get("email", email),
                            enabled=users[0].get("enabled", True))
    
    async def create_user(self, email: str, password: Optional[str] = None) -> str:
        """
        Create an account for ``email``.
        
        Without a password the account gets no credentials; the owner sets
        one through a reset link.
        
        Returns the user ID of the created user.
        """
        user_data: Dict[str, Any] = {
            "username": email,
            "email": email,
            "enabled": True,
            "emailVerified": False,
        }
        if password:
            user_data["credentials"] = [{
                "type": "password",
                "value": password,
                "temporary": False
            }]
        
        response = await self._request(
            "POST", self.users_url,
            json=user_data,
            headers={"Content-Type": "application/json"}
        )
        
        if response.status_code == 409:
            raise UserExistsError(email)
        
        if response.status_code != 201:
            logger.error(f"Failed to create user: {response.status_code} - {response.text}")
            raise IdentityProviderError(f"User creation failed with status {response.status_code}")
        
        # Extract user ID from Location header
        location_header = response.headers.get("Location")
        if location_header:
            user_id = location_header.split("/")[-1]
            logger.info(f"Created identity account: {email} (ID: {user_id})")
            return user_id
        
        user = await self.get_user_by_email(email)
        if user is None:
            raise UserNotFoundError(email)
        return user.id
    
    async def get_or_create_user(self, email: str) -> str:
        user = await self.get_user_by_email(email)
        if user is not None:
            return user.id
        return await self.create_user(email)
    
    async def delete_user(self, user_id: str) -> None:
        """Delete a user from Keycloak."""
        response = await self._request("DELETE", f"{self.users_url}/{user_id}")
        
        if response.status_code not in (200, 204):
            logger.error(f"Failed to delete user: {response.status_code} - {response.text}")
            raise IdentityProviderError(f"User deletion failed with status {response.status_code}")
        
        logger.info(f"Deleted identity account {user_id}")
    
    async def generate_password_reset_link(self, email: str) -> str:
        """
        Link to the realm's reset-credentials page for ``email``.
        
        Raises:
            UserNotFoundError: If no account has this email
        """
        user = await self.get_user_by_email(email)
        if user is None:
            raise UserNotFoundError(email)
        
        query = urlencode({"client_id": self.client_id, "login_hint": user.email})
        return f"{self.server_url}/realms/{self.realm}/login-actions/reset-credentials?{query}"
    
    async def userinfo(self, access_token: str) -> IdentityUser:
        """Resolve a user's bearer token to the account it was issued for."""
        url = f"{self.server_url}/realms/{self.realm}/protocol/openid-connect/userinfo"
        try:
            async with self._client() as client:
                response = await client.get(url, headers={"Authorization": f"Bearer {access_token}"})
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise IdentityProviderError(f"Identity provider unreachable: {e}")
        
        if response.status_code != 200:
            raise IdentityProviderError(f"Token rejected with status {response.status_code}")
        
        claims = response.json()
        email = claims.get("email")
        if not email:
            raise IdentityProviderError("Token carries no email claim")
        return IdentityUser(id=claims["sub"], email=email)


_identity_provider: Optional[KeycloakAdminClient] = None


def get_identity_provider() -> KeycloakAdminClient:
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = KeycloakAdminClient()
    return _identity_provider
