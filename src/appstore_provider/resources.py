"""
Managed resources of the App Store Connect provider.

Each resource translates one Game Center entity between its state record
and App Store Connect: ``create``, ``read``, ``update`` and ``delete`` call
the shared API client, and ``apply`` decides which of them a change of
configuration needs.
"""

import abc
import dataclasses
import logging
import os
import warnings
from typing import Generic, Optional, Type, TypeVar

from .client import AppStoreConnectAPI
from .exceptions import AppStoreConnectError, DriftDetected, UpstreamError
from .models import Achievement, AchievementImage, AchievementLocalization
from .schema import Attribute, Plan, Schema
from .utils import UNKNOWN, checksum, require_attributes

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Resource(abc.ABC, Generic[T]):
    """
    Create/read/update/delete synchronizer for one entity type.

    Subclasses set ``TYPE_NAME``, ``SCHEMA`` and ``MODEL`` and implement
    the operations the entity supports. The default ``update`` accepts the
    plan without calling the API.

    Args:
        client: Configured API client shared by the provider
    """

    TYPE_NAME: str = ""
    SCHEMA: Schema
    MODEL: Type[T]

    def __init__(self, client: AppStoreConnectAPI):
        self.client = client

    @abc.abstractmethod
    def create(self, config: T) -> T:
        ...

    @abc.abstractmethod
    def read(self, state: T) -> T:
        ...

    def update(self, plan: T, state: T) -> T:
        resolved = {
            name: getattr(state, name)
            for name, value in dataclasses.asdict(plan).items()
            if value is UNKNOWN
        }
        return dataclasses.replace(plan, **resolved)

    @abc.abstractmethod
    def delete(self, state: T) -> None:
        ...

    def plan(self, prior: Optional[T], config: T) -> Plan:
        """Compare the current state with a new configuration."""
        return self.SCHEMA.plan(
            dataclasses.asdict(prior) if prior is not None else None,
            dataclasses.asdict(config),
        )

    def apply(self, prior: Optional[T], config: Optional[T]) -> Optional[T]:
        """
        Bring the remote entity in line with ``config``.

        Args:
            prior: Current state, or None if the entity does not exist yet
            config: Desired configuration, or None to destroy the entity

        Returns:
            The new state, or None once destroyed
        """
        if config is None:
            if prior is not None:
                self.delete(prior)
            return None

        if prior is None:
            return self.create(config)

        plan = self.plan(prior, config)
        if plan.requires_replace:
            logger.info(
                f"{self.TYPE_NAME}: replacing {getattr(prior, 'id', None)}, "
                f"changed {plan.replace}"
            )
            self.delete(prior)
            return self.create(config)
        if plan.has_changes:
            return self.update(self.MODEL(**plan.planned), prior)
        return prior


class AchievementResource(Resource[Achievement]):
    """Manages a Game Center achievement."""

    TYPE_NAME = "appstore_achievement"
    MODEL = Achievement
    SCHEMA = Schema(
        description="Manages game center achievement.",
        attributes=[
            Attribute(
                "id",
                str,
                "Identifier of the achievement.",
                computed=True,
                use_state_for_unknown=True,
            ),
            Attribute(
                "game_center_id",
                str,
                "Identifier of the game center to associate the achievement with. "
                "Resource will be re-created if this value is changed.",
                required=True,
                requires_replace=True,
            ),
            Attribute(
                "reference_name",
                str,
                "An internal name of the achievement.",
                required=True,
            ),
            Attribute(
                "vendor_id",
                str,
                "A chosen alphanumeric identifier of the achievement. "
                "Resource will be re-created if this value is changed.",
                required=True,
                requires_replace=True,
            ),
            Attribute(
                "points",
                int,
                "The points that each achievement is worth.",
                required=True,
            ),
            Attribute(
                "repeatable",
                bool,
                "An indication of whether the player can earn the achievement "
                "multiple times.",
                required=True,
            ),
            Attribute(
                "show_before_earned",
                bool,
                "An indication of whether the achievement is visible to the player "
                "before it is earned.",
                required=True,
            ),
        ],
    )

    def create(self, config: Achievement) -> Achievement:
        require_attributes(
            config.to_attributes(), self.SCHEMA.required, "create an achievement"
        )

        try:
            game_center = self.client.get_game_center(config.game_center_id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to read game center", e) from e

        try:
            response = self.client.create_achievement(game_center["id"], config.to_api())
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to create achievement", e) from e

        logger.info(f"Created achievement {response['id']} ({config.vendor_id})")
        return dataclasses.replace(config, id=response["id"])

    def read(self, state: Achievement) -> Achievement:
        try:
            response = self.client.get_achievement(state.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to read achievement", e) from e

        remote = Achievement.from_api(response)
        return dataclasses.replace(
            state,
            reference_name=remote.reference_name,
            vendor_id=remote.vendor_id,
            points=remote.points,
            repeatable=remote.repeatable,
            show_before_earned=remote.show_before_earned,
        )

    def update(self, plan: Achievement, state: Achievement) -> Achievement:
        plan = super().update(plan, state)
        try:
            self.client.update_achievement(plan.id, plan.to_api_update())
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to update achievement", e) from e

        logger.info(f"Updated achievement {plan.id}")
        return plan

    def delete(self, state: Achievement) -> None:
        try:
            self.client.delete_achievement(state.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to delete achievement", e) from e
        logger.info(f"Deleted achievement {state.id}")


class AchievementLocalizationResource(Resource[AchievementLocalization]):
    """Manages the name and descriptions of an achievement for one locale."""

    TYPE_NAME = "appstore_achievement_localization"
    MODEL = AchievementLocalization
    SCHEMA = Schema(
        description="Manages game center achievement localization.",
        attributes=[
            Attribute(
                "id", str, "Identifier of the achievement localization.", computed=True
            ),
            Attribute(
                "achievement_id",
                str,
                "Identifier of the achievement to associate the localization with.",
                required=True,
            ),
            Attribute(
                "locale", str, "Locale of the achievement localization.", required=True
            ),
            Attribute("name", str, "Name of the achievement.", required=True),
            Attribute(
                "before_earned_description",
                str,
                "Description of the achievement before it is earned.",
                required=True,
            ),
            Attribute(
                "after_earned_description",
                str,
                "Description of the achievement after it is earned.",
                required=True,
            ),
        ],
    )

    def create(self, config: AchievementLocalization) -> AchievementLocalization:
        require_attributes(
            config.to_attributes(),
            self.SCHEMA.required,
            "create an achievement localization",
        )

        try:
            achievement = self.client.get_achievement(config.achievement_id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to read achievement", e) from e

        try:
            response = self.client.create_achievement_localization(
                achievement["id"], config.to_api()
            )
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to create achievement localization", e) from e

        logger.info(
            f"Created achievement localization {response['id']} ({config.locale})"
        )
        return dataclasses.replace(config, id=response["id"])

    def read(self, state: AchievementLocalization) -> AchievementLocalization:
        try:
            response = self.client.get_achievement_localization(state.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to read achievement localization", e) from e

        remote = AchievementLocalization.from_api(response)
        return dataclasses.replace(
            state,
            locale=remote.locale,
            name=remote.name,
            before_earned_description=remote.before_earned_description,
            after_earned_description=remote.after_earned_description,
        )

    def delete(self, state: AchievementLocalization) -> None:
        try:
            self.client.delete_achievement_localization(state.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to delete achievement localization", e) from e
        logger.info(f"Deleted achievement localization {state.id}")


class AchievementImageResource(Resource[AchievementImage]):
    """
    Manages the image of an achievement localization.

    The image file is read from local disk. Its MD5 checksum is kept in
    state; when the file changes afterwards, ``read`` clears ``file`` so
    the next plan uploads the image again.
    """

    TYPE_NAME = "appstore_achievement_image"
    MODEL = AchievementImage
    SCHEMA = Schema(
        description="Manages game center achievement localization images.",
        attributes=[
            Attribute("id", str, "Identifier of the achievement image.", computed=True),
            Attribute(
                "achievement_localization_id",
                str,
                "Identifier of the achievement localization to associate the image with.",
                required=True,
            ),
            Attribute("file", str, "Path to the image file.", required=True),
            Attribute(
                "checksum",
                str,
                "MD5 checksum of the image.",
                computed=True,
                requires_replace=True,
            ),
        ],
    )

    @staticmethod
    def _read_file(path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise UpstreamError("Failed to read image file", e) from e

    def create(self, config: AchievementImage) -> AchievementImage:
        require_attributes(
            config.to_attributes(),
            self.SCHEMA.required,
            "create an achievement image",
        )

        image = self._read_file(config.file)

        try:
            localization = self.client.get_achievement_localization(
                config.achievement_localization_id
            )
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to get achievement localization", e) from e

        try:
            asset = self.client.create_achievement_image(
                localization["id"], os.path.basename(config.file), image
            )
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to create achievement image", e) from e

        logger.info(f"Created achievement image {asset['id']} from {config.file}")
        return dataclasses.replace(config, id=asset["id"], checksum=checksum(image))

    def read(self, state: AchievementImage) -> AchievementImage:
        try:
            self.client.get_achievement_image(state.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to read achievement image", e) from e

        if not state.file:
            return state

        image = self._read_file(state.file)
        current = checksum(image)
        if current != state.checksum:
            logger.warning(
                f"Image file {state.file} changed since upload "
                f"({state.checksum} != {current})"
            )
            warnings.warn(
                f"Image file {state.file} of achievement image {state.id} "
                f"no longer matches the uploaded content",
                DriftDetected,
                stacklevel=2,
            )
            return dataclasses.replace(state, file="")
        return state

    def delete(self, state: AchievementImage) -> None:
        try:
            self.client.delete_achievement_image(state.id)
        except AppStoreConnectError as e:
            raise UpstreamError("Failed to delete achievement image", e) from e
        logger.info(f"Deleted achievement image {state.id}")
