"""
App Store Connect provider.

The provider resolves the API credentials once, builds the shared API
client and hands it to every resource and data source it creates.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Type

from .client import AppStoreConnectAPI, TokenSource
from .data_sources import AppDataSource, AppsDataSource, DataSource, GameCenterDataSource
from .exceptions import AppStoreConnectError, ConfigurationError, ValidationError
from .resources import (
    AchievementImageResource,
    AchievementLocalizationResource,
    AchievementResource,
    Resource,
)
from .schema import Attribute, Schema
from .utils import UNKNOWN

logger = logging.getLogger(__name__)

# attribute -> (label, environment variable)
CREDENTIALS = {
    "key_id": ("Key ID", "KEY_ID"),
    "issuer_id": ("Issuer ID", "ISSUER_ID"),
    "private_key": ("Private Key", "PRIVATE_KEY"),
}


class Provider:
    """
    Entry point for configuring App Store Connect access.

    Usage:
        provider = Provider()
        provider.configure({"key_id": "...", "issuer_id": "...", "private_key": "..."})
        achievements = provider.resource("appstore_achievement")

    Args:
        version: Provider version reported to the host
        environ: Environment used for credential fallbacks (defaults to os.environ)
        token_lifetime: Lifetime in seconds of each issued API token
    """

    TYPE_NAME = "appstore"
    SCHEMA = Schema(
        description="Interact with App Store Connect.",
        attributes=[
            Attribute(
                "key_id",
                str,
                "Private key ID from App Store Connect, for example, 2X9R4HXF34.",
                required=True,
            ),
            Attribute(
                "issuer_id",
                str,
                "Issuer ID from the API Keys page in App Store Connect, for example, "
                "57246542-96fe-1a63-e053-0824d011072a.",
                required=True,
            ),
            Attribute(
                "private_key",
                str,
                "PEM-encoded private key from App Store Connect. Keep your API keys "
                "secure and private. Don't share your keys, store keys in a code "
                "repository, or include keys in client-side code. If the key becomes "
                "lost or compromised, remember to revoke it immediately.",
                required=True,
                sensitive=True,
            ),
        ],
    )

    def __init__(
        self,
        version: str = "dev",
        environ: Optional[Mapping[str, str]] = None,
        token_lifetime: int = 60,
    ):
        self.version = version
        self.environ = os.environ if environ is None else environ
        self.token_lifetime = token_lifetime
        self.client: Optional[AppStoreConnectAPI] = None

    def _resolve_credentials(self, config: Mapping[str, Any]) -> Dict[str, str]:
        """Merge configured credentials with their environment fallbacks."""
        unknown: List[AppStoreConnectError] = []
        for attribute, (label, variable) in CREDENTIALS.items():
            if config.get(attribute) is UNKNOWN:
                unknown.append(
                    ValidationError(
                        attribute,
                        f"Unknown {label}",
                        f"The provider cannot create the App Store Connect API client "
                        f"as there is an unknown configuration value for the {label}. "
                        f"Either target apply the source of the value first, set the "
                        f"value statically in the configuration, or use the {variable} "
                        f"environment variable.",
                    )
                )
        if unknown:
            raise ConfigurationError(unknown)

        credentials: Dict[str, str] = {}
        missing: List[AppStoreConnectError] = []
        for attribute, (label, variable) in CREDENTIALS.items():
            value = config.get(attribute)
            if value is None:
                value = self.environ.get(variable, "")
            if not value:
                missing.append(
                    ValidationError(
                        attribute,
                        f"Missing {label}",
                        f"The provider cannot create the App Store Connect API client "
                        f"as there is a missing or empty value for the {label}. Set the "
                        f"value in the configuration or use the {variable} environment "
                        f"variable. If either is already set, ensure the value is not "
                        f"empty.",
                    )
                )
            credentials[attribute] = value
        if missing:
            raise ConfigurationError(missing)

        return credentials

    def configure(self, config: Mapping[str, Any]) -> AppStoreConnectAPI:
        """
        Build the API client from provider configuration.

        Args:
            config: Values for key_id, issuer_id and private_key; None falls
                back to the KEY_ID, ISSUER_ID and PRIVATE_KEY environment
                variables

        Returns:
            The API client shared by every resource and data source

        Raises:
            ConfigurationError: With one error per unknown or missing value,
                or wrapping the failure to load the private key
        """
        logger.info("Configuring App Store Connect API client")

        credentials = self._resolve_credentials(config)

        logger.debug(
            f"Creating App Store Connect API client "
            f"(key_id={credentials['key_id']}, issuer_id={credentials['issuer_id']})"
        )

        try:
            source = TokenSource(
                key_id=credentials["key_id"],
                issuer_id=credentials["issuer_id"],
                private_key=credentials["private_key"],
                expire_after=self.token_lifetime,
            )
        except AppStoreConnectError as e:
            raise ConfigurationError(
                [
                    AppStoreConnectError(
                        f"Failed to create App Store Connect API client: {e}"
                    )
                ]
            ) from e

        self.client = AppStoreConnectAPI(source)
        logger.info("Configured App Store Connect API client")
        return self.client

    @staticmethod
    def resources() -> Dict[str, Type[Resource]]:
        return {
            cls.TYPE_NAME: cls
            for cls in (
                AchievementResource,
                AchievementLocalizationResource,
                AchievementImageResource,
            )
        }

    @staticmethod
    def data_sources() -> Dict[str, Type[DataSource]]:
        return {
            cls.TYPE_NAME: cls
            for cls in (AppsDataSource, AppDataSource, GameCenterDataSource)
        }

    def _require_client(self) -> AppStoreConnectAPI:
        if self.client is None:
            raise AppStoreConnectError("Provider is not configured")
        return self.client

    def resource(self, type_name: str) -> Resource:
        """Create the named resource bound to the configured client."""
        return self.resources()[type_name](self._require_client())

    def data_source(self, type_name: str) -> DataSource:
        """Create the named data source bound to the configured client."""
        return self.data_sources()[type_name](self._require_client())
