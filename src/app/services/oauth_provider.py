from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class OAuthProviderError(Exception):
    """The identity provider could not be reached or rejected the exchange"""


class OAuthProfile(BaseModel):
    """
    Identity returned by an external provider after the code exchange.

    email_verified defaults to True for providers that only hand out
    addresses they have verified.
    """

    provider_id: str
    email: Optional[str] = None
    email_verified: bool = True
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    display_name: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def first_name(self) -> str:
        if self.given_name:
            return self.given_name
        if self.display_name and self.display_name.split():
            return self.display_name.split()[0]
        return "User"

    @property
    def last_name(self) -> str:
        if self.family_name:
            return self.family_name
        if self.display_name:
            return " ".join(self.display_name.split()[1:])
        return ""


class IOAuthProvider(ABC):
    """External identity provider (authorization code flow)"""

    name: str

    @abstractmethod
    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """URL the browser is sent to in order to authenticate"""
        pass

    @abstractmethod
    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        """
        Exchange the authorization code and load the user's profile.

        Raises:
            OAuthProviderError: provider unreachable or exchange rejected
        """
        pass
