import logging
from typing import Optional

import httpx

from coursehub.core.config import settings

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


class OAuthService:
    """Turns a provider token from the client into a verified identity.

    Each verifier returns ``{"email", "first_name", "last_name", "avatar"}`` or
    None when the provider does not vouch for the token.
    """

    async def verify_google_token(self, token: str) -> Optional[dict]:
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(GOOGLE_TOKENINFO_URL, params={"id_token": token})
        except httpx.HTTPError as e:
            logger.error(f"Google token verification failed: {str(e)}")
            return None

        if response.status_code != 200:
            return None

        info = response.json()
        if settings.GOOGLE_CLIENT_ID and info.get("aud") != settings.GOOGLE_CLIENT_ID:
            logger.warning("Google token issued for another client: %s", info.get("aud"))
            return None
        if not info.get("email") or str(info.get("email_verified", "true")).lower() != "true":
            return None

        return {
            "email": info["email"].lower(),
            "first_name": info.get("given_name") or info["email"].split("@")[0],
            "last_name": info.get("family_name") or "",
            "avatar": info.get("picture"),
        }

    async def verify_github_token(self, token: str) -> Optional[dict]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }
        try:
            async with httpx.AsyncClient(base_url=settings.GITHUB_API_URL, headers=headers, timeout=10.0) as client:
                response = await client.get("/user")
                if response.status_code != 200:
                    return None
                profile = response.json()

                email = profile.get("email")
                if not email:
                    # Private addresses only show up on the emails endpoint.
                    emails_response = await client.get("/user/emails")
                    if emails_response.status_code == 200:
                        email = next(
                            (e["email"] for e in emails_response.json() if e.get("primary") and e.get("verified")),
                            None,
                        )
        except httpx.HTTPError as e:
            logger.error(f"GitHub token verification failed: {str(e)}")
            return None

        if not email:
            return None

        first_name, _, last_name = (profile.get("name") or profile.get("login") or "").partition(" ")
        return {
            "email": email.lower(),
            "first_name": first_name or email.split("@")[0],
            "last_name": last_name,
            "avatar": profile.get("avatar_url"),
        }

    async def verify(self, provider: str, token: str) -> Optional[dict]:
        if provider == "google":
            return await self.verify_google_token(token)
        if provider == "github":
            return await self.verify_github_token(token)
        return None

oauth_service = OAuthService()
