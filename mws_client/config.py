from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """MWS connection settings, read from ``MWS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MWS_",
        extra="ignore",
        case_sensitive=False,
    )

    # Marketplace endpoint. The North America host is the default; EU/FE
    # sellers override it (e.g. https://mws-eu.amazonservices.com/).
    endpoint: str = "https://mws.amazonservices.com/"

    access_key_id: Optional[str] = None
    secret_key: Optional[str] = None
    merchant_id: Optional[str] = None
    marketplace_id: Optional[str] = None

    # API version sent with every signed request.
    api_version: str = "2009-01-01"

    application: str = "mws_client"
    application_version: str = "0.1"

    http_timeout_seconds: float = Field(default=30.0, gt=0)
    http_connect_timeout_seconds: float = Field(default=10.0, gt=0)

    def user_agent(self, agent_attributes: Optional[Dict[str, str]] = None) -> str:
        """Build the User-Agent MWS expects: ``App/Version (Language=Python; k=v)``."""
        attrs: Dict[str, str] = {"Language": "Python"}
        attrs.update(agent_attributes or {})
        attr_str = "; ".join(f"{k}={v}" for k, v in attrs.items())
        return f"{self.application}/{self.application_version} ({attr_str})"

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_key and self.merchant_id)


settings = Settings()
