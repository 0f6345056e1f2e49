"""
Read-only data sources of the App Store Connect provider.
"""

import dataclasses
import logging

from .client import AppStoreConnectAPI
from .exceptions import AppStoreConnectError, UpstreamError
from .models import App, Apps, GameCenter
from .schema import Attribute, Schema
from .utils import require_attributes

logger = logging.getLogger(__name__)


class DataSource:
    """Base class for lookups bound to the provider's API client."""

    TYPE_NAME: str = ""
    SCHEMA: Schema

    def __init__(self, client: AppStoreConnectAPI):
        self.client = client


class AppDataSource(DataSource):
    """Fetches one app by identifier."""

    TYPE_NAME = "appstore_app"
    SCHEMA = Schema(
        description="Fetches app information from the App Store Connect.",
        attributes=[
            Attribute("id", str, "Identifier of the app.", required=True),
            Attribute("name", str, "Name of the app.", computed=True),
            Attribute("bundle_id", str, "Bundle identifier of the app.", computed=True),
            Attribute("sku", str, "Stock keeping unit of the app.", computed=True),
        ],
    )

    def read(self, config: App) -> App:
        require_attributes(config.to_attributes(), ["id"], "fetch app information")

        try:
            response = self.client.get_app(config.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Unable to Read App", e) from e

        app = App.from_api(response)
        return dataclasses.replace(
            config, name=app.name, bundle_id=app.bundle_id, sku=app.sku
        )


class AppsDataSource(DataSource):
    """Lists every app of the account."""

    TYPE_NAME = "appstore_apps"
    SCHEMA = Schema(
        description="Lists apps from the App Store Connect.",
        attributes=[
            Attribute("apps", list, "Apps of the account.", computed=True),
        ],
    )

    def read(self) -> Apps:
        try:
            response = self.client.list_apps()
        except AppStoreConnectError as e:
            raise UpstreamError("Unable to Read Apps", e) from e

        return Apps(apps=[App.from_api(app) for app in response])


class GameCenterDataSource(DataSource):
    """Fetches the Game Center detail of an app."""

    TYPE_NAME = "appstore_game_center"
    SCHEMA = Schema(
        description="Fetches Game Center information from the App Store Connect.",
        attributes=[
            Attribute(
                "app_id",
                str,
                "Identifier of the app to fetch Game Center information for.",
                required=True,
            ),
            Attribute("id", str, "Identifier of the game center.", computed=True),
            Attribute(
                "arcade_enabled",
                bool,
                "Indicates whether Game Center is enabled for the app on Apple Arcade.",
                computed=True,
            ),
            Attribute(
                "challenge_enabled",
                bool,
                "Indicates whether Game Center challenges are enabled for the app.",
                computed=True,
            ),
        ],
    )

    def read(self, config: GameCenter) -> GameCenter:
        require_attributes(
            config.to_attributes(), ["app_id"], "fetch Game Center information"
        )

        try:
            app = self.client.get_app(config.app_id)
        except AppStoreConnectError as e:
            raise UpstreamError("Unable to Read App", e) from e

        try:
            response = self.client.get_game_center_for_app(app["id"])
        except AppStoreConnectError as e:
            raise UpstreamError("Unable to Read Game Center", e) from e

        game_center = GameCenter.from_api(response)
        logger.debug(f"Game Center {game_center.id} found for app {app['id']}")
        return dataclasses.replace(
            config,
            id=game_center.id,
            arcade_enabled=game_center.arcade_enabled,
            challenge_enabled=game_center.challenge_enabled,
        )
