"""
Seed Settings.

Every seed operation is opt-in through environment variables; with nothing
set the seed command does nothing.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SeedSettings(BaseSettings):
    """Environment switches for ``qwiksale-seed``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    reset: bool = Field(default=False, alias="SEED_RESET", description="Enable cleanup mode")
    reset_all: bool = Field(
        default=False, alias="SEED_RESET_ALL", description="With SEED_RESET, delete all marketplace rows"
    )
    purge_demo: bool = Field(default=False, alias="SEED_PURGE_DEMO", description="Delete known demo/test artifacts")
    demo: bool = Field(default=False, alias="SEED_DEMO", description="Create the demo sellers and listings")
    catalog: bool = Field(default=False, alias="SEED_CATALOG", description="Load and expand the product catalog")
    min_products: int = Field(default=40, ge=1, alias="SEED_MIN", description="Minimum catalog size after cloning")
    source: Optional[str] = Field(default=None, alias="SEED_SOURCE", description="Path to a products JSON file")
    demo_user_email: str = Field(default="seller@qwiksale.test", alias="SEED_DEMO_USER_EMAIL")
    demo_user_name: str = Field(default="Demo Seller", alias="SEED_DEMO_USER_NAME")
    allow_prod: bool = Field(default=False, alias="SEED_ALLOW_PROD", description="Allow modifying data in production")

    environment: str = Field(default="development", alias="QWIKSALE_ENV")

    @property
    def modifies_data(self) -> bool:
        """SEED_RESET counts only together with SEED_RESET_ALL or SEED_CATALOG."""
        return (self.reset and self.reset_all) or self.purge_demo or self.demo or self.catalog

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"
