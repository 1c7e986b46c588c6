"""
Tests for the Keycloak and EmailJS clients against mocked HTTP transports.
"""

import json
import pytest
import httpx

from edutoolkit.auth.keycloak_admin import (
    IdentityProviderError,
    KeycloakAdminClient,
    UserExistsError,
    UserNotFoundError,
)
from edutoolkit.services.email_service import EmailDeliveryError, EmailService


def keycloak_with(handler) -> KeycloakAdminClient:
    client = KeycloakAdminClient()
    client.server_url = "http://kc.test"
    client.realm = "edutoolkit"
    client._access_token = "admin-token"
    client._token_expires_at = float("inf")
    client._client = lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


class TestKeycloakAdminClient:
    
    @pytest.mark.asyncio
    async def test_get_user_by_email(self):
        def handler(request: httpx.Request):
            assert request.url.path == "/admin/realms/edutoolkit/users"
            assert request.url.params["email"] == "t@school.edu"
            assert request.headers["Authorization"] == "Bearer admin-token"
            return httpx.Response(200, json=[{"id": "kc-1", "email": "t@school.edu"}])
        
        user = await keycloak_with(handler).get_user_by_email("t@school.edu")
        
        assert user.id == "kc-1"
    
    @pytest.mark.asyncio
    async def test_get_missing_user(self):
        user = await keycloak_with(lambda r: httpx.Response(200, json=[])).get_user_by_email("x@school.edu")
        assert user is None
    
    @pytest.mark.asyncio
    async def test_create_user_reads_location(self):
        def handler(request: httpx.Request):
            body = json.loads(request.content)
            assert body["email"] == "t@school.edu"
            assert body["credentials"][0]["value"] == "secret123"
            return httpx.Response(201, headers={"Location": "http://kc.test/admin/realms/edutoolkit/users/kc-9"})
        
        assert await keycloak_with(handler).create_user("t@school.edu", "secret123") == "kc-9"
    
    @pytest.mark.asyncio
    async def test_create_existing_user(self):
        client = keycloak_with(lambda r: httpx.Response(409))
        with pytest.raises(UserExistsError):
            await client.create_user("t@school.edu", "secret123")
    
    @pytest.mark.asyncio
    async def test_get_or_create_prefers_existing(self):
        calls = []
        
        def handler(request: httpx.Request):
            calls.append(request.method)
            return httpx.Response(200, json=[{"id": "kc-1", "email": "t@school.edu"}])
        
        assert await keycloak_with(handler).get_or_create_user("t@school.edu") == "kc-1"
        assert calls == ["GET"]
    
    @pytest.mark.asyncio
    async def test_expired_admin_token_is_renewed(self):
        issued = []
        
        def handler(request: httpx.Request):
            if request.url.path == "/realms/master/protocol/openid-connect/token":
                issued.append(f"t{len(issued) + 1}")
                # expires within the renewal margin
                return httpx.Response(200, json={"access_token": issued[-1], "expires_in": 5})
            assert request.headers["Authorization"] == f"Bearer {issued[-1]}"
            return httpx.Response(200, json=[])
        
        client = keycloak_with(handler)
        client._access_token = None
        
        await client.get_user_by_email("a@school.edu")
        await client.get_user_by_email("b@school.edu")
        
        assert issued == ["t1", "t2"]
    
    @pytest.mark.asyncio
    async def test_rejected_admin_token_is_retried_once(self):
        seen = []
        
        def handler(request: httpx.Request):
            if request.url.path == "/realms/master/protocol/openid-connect/token":
                return httpx.Response(200, json={"access_token": "fresh", "expires_in": 300})
            seen.append(request.headers["Authorization"])
            if request.headers["Authorization"] == "Bearer admin-token":
                return httpx.Response(401)
            return httpx.Response(204)
        
        await keycloak_with(handler).delete_user("kc-1")
        
        assert seen == ["Bearer admin-token", "Bearer fresh"]
    
    @pytest.mark.asyncio
    async def test_second_rejection_is_reported(self):
        def handler(request: httpx.Request):
            if request.url.path == "/realms/master/protocol/openid-connect/token":
                return httpx.Response(200, json={"access_token": "fresh", "expires_in": 300})
            return httpx.Response(401)
        
        with pytest.raises(IdentityProviderError):
            await keycloak_with(handler).get_user_by_email("t@school.edu")
    
    @pytest.mark.asyncio
    async def test_delete_failure(self):
        client = keycloak_with(lambda r: httpx.Response(500, text="boom"))
        with pytest.raises(IdentityProviderError):
            await client.delete_user("kc-1")
    
    @pytest.mark.asyncio
    async def test_reset_link_for_unknown_email(self):
        client = keycloak_with(lambda r: httpx.Response(200, json=[]))
        with pytest.raises(UserNotFoundError):
            await client.generate_password_reset_link("x@school.edu")
    
    @pytest.mark.asyncio
    async def test_reset_link(self):
        client = keycloak_with(lambda r: httpx.Response(200, json=[{"id": "kc-1", "email": "t@school.edu"}]))
        link = await client.generate_password_reset_link("t@school.edu")
        
        assert link.startswith("http://kc.test/realms/edutoolkit/login-actions/reset-credentials?")
        assert "login_hint=t%40school.edu" in link
    
    @pytest.mark.asyncio
    async def test_userinfo(self):
        def handler(request: httpx.Request):
            assert request.headers["Authorization"] == "Bearer user-token"
            return httpx.Response(200, json={"sub": "kc-1", "email": "t@school.edu"})
        
        user = await keycloak_with(handler).userinfo("user-token")
        
        assert (user.id, user.email) == ("kc-1", "t@school.edu")
    
    @pytest.mark.asyncio
    async def test_userinfo_rejected(self):
        client = keycloak_with(lambda r: httpx.Response(401))
        with pytest.raises(IdentityProviderError):
            await client.userinfo("bad-token")
    
    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("refused", request=request)
        
        with pytest.raises(IdentityProviderError):
            await keycloak_with(handler).get_user_by_email("t@school.edu")


class TestEmailService:
    
    def mailer_with(self, handler) -> EmailService:
        mailer = EmailService(api_url="http://mail.test/send")
        mailer.service_id = "svc"
        mailer.template_id = "tpl"
        mailer.public_key = "pub"
        mailer.private_key = "priv"
        mailer._client = lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return mailer
    
    @pytest.mark.asyncio
    async def test_reset_payload(self):
        sent = []
        
        def handler(request: httpx.Request):
            sent.append(json.loads(request.content))
            return httpx.Response(200, text="OK")
        
        await self.mailer_with(handler).send_password_reset("t@school.edu", "https://reset")
        
        assert sent == [{
            "service_id": "svc",
            "template_id": "tpl",
            "user_id": "pub",
            "accessToken": "priv",
            "template_params": {"to_email": "t@school.edu", "reset_link": "https://reset"},
        }]
    
    @pytest.mark.asyncio
    async def test_rejected(self):
        mailer = self.mailer_with(lambda r: httpx.Response(400, text="bad template"))
        with pytest.raises(EmailDeliveryError):
            await mailer.send_password_reset("t@school.edu", "https://reset")
