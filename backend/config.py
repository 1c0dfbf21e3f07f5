"""
Configuration management for the TipSplit service.

Loads settings from .env via pydantic-settings.

Notes:
    - platform_wallet is the treasury identity. It is fixed at deploy time,
      validated once at startup and never mutated afterwards.
    - validate_production_settings() blocks simulation/demo mode in production.
"""
import logging

from algosdk import encoding
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Algorand TestNet ────────────────────────────────────────────
    algorand_algod_address: str = "https://testnet-api.algonode.cloud"
    algorand_algod_token: str = ""
    confirmation_rounds: int = 4
    tip_worker_threads: int = 4  # thread pool for blocking ledger calls

    # ── Platform Treasury (receives the 3% fee) ─────────────────────
    platform_wallet: str = ""

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    simulation_mode: bool = True  # in-memory ledger instead of Algorand

    # ── Auth (JWT) ──────────────────────────────────────────────────
    jwt_secret: str = ""
    jwt_issuer: str = "tipsplit-api"
    jwt_access_ttl_minutes: int = 15

    # ── Demo Mode ───────────────────────────────────────────────────
    # When True, payer mnemonics from demo_accounts.json sign the
    # Algorand payment group. In production the wallet signs client-side.
    demo_mode: bool = True
    demo_accounts_file: str = "scripts/demo_accounts.json"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:8080,http://127.0.0.1:8080,http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def validate_platform_wallet(self) -> str:
        """
        Check the treasury identity is a well-formed Algorand address.

        Called during app startup; a malformed value stops the service
        from starting.
        """
        if not self.platform_wallet:
            raise ValueError("PLATFORM_WALLET must be set to the treasury address.")
        if not encoding.is_valid_address(self.platform_wallet):
            raise ValueError(
                f"PLATFORM_WALLET is not a valid Algorand address: "
                f"{self.platform_wallet[:12]}..."
            )
        return self.platform_wallet

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup.
        """
        self.validate_platform_wallet()

        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if self.simulation_mode:
                raise ValueError(
                    "SIMULATION_MODE must be false in production. "
                    "The in-memory ledger allows free wallet funding."
                )
            if self.demo_mode:
                raise ValueError(
                    "DEMO_MODE must be false in production. "
                    "Demo mode signs with stored private keys."
                )
            if not self.jwt_secret:
                raise ValueError(
                    "JWT_SECRET must be set in production. "
                    "It is used to verify payer access tokens."
                )
            logger.info("✅ Production settings validated")
        else:
            warnings = []
            if self.simulation_mode:
                warnings.append("SIMULATION_MODE=true (in-memory ledger, wallet funding enabled)")
            if self.demo_mode:
                warnings.append("DEMO_MODE=true (server-side signing with demo keys)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(f"⚠️  {w}")


# Global settings instance
settings = Settings()
