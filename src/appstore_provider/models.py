"""
State records for appstore-provider resources and data sources.

Every record is a flat dataclass named after its Terraform attributes.
``from_attributes`` builds a record from configuration values,
``to_attributes`` projects it back, and ``from_api`` reads the fields an
App Store Connect resource object carries.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class Achievement:
    id: Optional[str] = None
    game_center_id: Optional[str] = None
    reference_name: Optional[str] = None
    vendor_id: Optional[str] = None
    points: Optional[int] = None
    repeatable: Optional[bool] = None
    show_before_earned: Optional[bool] = None

    @classmethod
    def from_attributes(cls, values: Mapping[str, Any]) -> "Achievement":
        return cls(
            id=values.get("id"),
            game_center_id=values.get("game_center_id"),
            reference_name=values.get("reference_name"),
            vendor_id=values.get("vendor_id"),
            points=values.get("points"),
            repeatable=values.get("repeatable"),
            show_before_earned=values.get("show_before_earned"),
        )

    @classmethod
    def from_api(cls, resource: Mapping[str, Any]) -> "Achievement":
        attributes = resource.get("attributes", {})
        return cls(
            id=resource.get("id"),
            reference_name=attributes.get("referenceName"),
            vendor_id=attributes.get("vendorIdentifier"),
            points=attributes.get("points"),
            repeatable=attributes.get("repeatable"),
            show_before_earned=attributes.get("showBeforeEarned"),
        )

    def to_attributes(self) -> Dict[str, Any]:
        return asdict(self)

    def to_api(self) -> Dict[str, Any]:
        """Attributes sent when the achievement is created."""
        return {
            "referenceName": self.reference_name,
            "vendorIdentifier": self.vendor_id,
            "points": self.points,
            "repeatable": self.repeatable,
            "showBeforeEarned": self.show_before_earned,
        }

    def to_api_update(self) -> Dict[str, Any]:
        """Attributes that can change in place; vendor id is fixed at creation."""
        return {
            "referenceName": self.reference_name,
            "points": self.points,
            "repeatable": self.repeatable,
            "showBeforeEarned": self.show_before_earned,
        }


@dataclass
class AchievementLocalization:
    id: Optional[str] = None
    achievement_id: Optional[str] = None
    locale: Optional[str] = None
    name: Optional[str] = None
    before_earned_description: Optional[str] = None
    after_earned_description: Optional[str] = None

    @classmethod
    def from_attributes(cls, values: Mapping[str, Any]) -> "AchievementLocalization":
        return cls(
            id=values.get("id"),
            achievement_id=values.get("achievement_id"),
            locale=values.get("locale"),
            name=values.get("name"),
            before_earned_description=values.get("before_earned_description"),
            after_earned_description=values.get("after_earned_description"),
        )

    @classmethod
    def from_api(cls, resource: Mapping[str, Any]) -> "AchievementLocalization":
        attributes = resource.get("attributes", {})
        return cls(
            id=resource.get("id"),
            locale=attributes.get("locale"),
            name=attributes.get("name"),
            before_earned_description=attributes.get("beforeEarnedDescription"),
            after_earned_description=attributes.get("afterEarnedDescription"),
        )

    def to_attributes(self) -> Dict[str, Any]:
        return asdict(self)

    def to_api(self) -> Dict[str, Any]:
        return {
            "locale": self.locale,
            "name": self.name,
            "beforeEarnedDescription": self.before_earned_description,
            "afterEarnedDescription": self.after_earned_description,
        }


@dataclass
class AchievementImage:
    id: Optional[str] = None
    achievement_localization_id: Optional[str] = None
    file: Optional[str] = None
    checksum: Optional[str] = None

    @classmethod
    def from_attributes(cls, values: Mapping[str, Any]) -> "AchievementImage":
        return cls(
            id=values.get("id"),
            achievement_localization_id=values.get("achievement_localization_id"),
            file=values.get("file"),
            checksum=values.get("checksum"),
        )

    def to_attributes(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class App:
    id: Optional[str] = None
    name: Optional[str] = None
    bundle_id: Optional[str] = None
    sku: Optional[str] = None

    @classmethod
    def from_attributes(cls, values: Mapping[str, Any]) -> "App":
        return cls(
            id=values.get("id"),
            name=values.get("name"),
            bundle_id=values.get("bundle_id"),
            sku=values.get("sku"),
        )

    @classmethod
    def from_api(cls, resource: Mapping[str, Any]) -> "App":
        attributes = resource.get("attributes", {})
        return cls(
            id=resource.get("id"),
            name=attributes.get("name"),
            bundle_id=attributes.get("bundleId"),
            sku=attributes.get("sku"),
        )

    def to_attributes(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Apps:
    apps: List[App] = field(default_factory=list)

    def to_attributes(self) -> Dict[str, Any]:
        return {"apps": [app.to_attributes() for app in self.apps]}


@dataclass
class GameCenter:
    id: Optional[str] = None
    app_id: Optional[str] = None
    arcade_enabled: Optional[bool] = None
    challenge_enabled: Optional[bool] = None

    @classmethod
    def from_attributes(cls, values: Mapping[str, Any]) -> "GameCenter":
        return cls(
            id=values.get("id"),
            app_id=values.get("app_id"),
            arcade_enabled=values.get("arcade_enabled"),
            challenge_enabled=values.get("challenge_enabled"),
        )

    @classmethod
    def from_api(cls, resource: Mapping[str, Any]) -> "GameCenter":
        attributes = resource.get("attributes", {})
        return cls(
            id=resource.get("id"),
            arcade_enabled=attributes.get("arcadeEnabled"),
            challenge_enabled=attributes.get("challengeEnabled"),
        )

    def to_attributes(self) -> Dict[str, Any]:
        return asdict(self)
