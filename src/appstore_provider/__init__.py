"""
appstore-provider

Declarative management of App Store Connect Game Center achievements,
their localizations and images, with lookups for apps and Game Center
details.
"""

from .client import AppStoreConnectAPI, TokenSource
from .provider import Provider
from .resources import (
    AchievementResource,
    AchievementLocalizationResource,
    AchievementImageResource,
)
from .data_sources import AppDataSource, AppsDataSource, GameCenterDataSource
from .models import (
    Achievement,
    AchievementLocalization,
    AchievementImage,
    App,
    Apps,
    GameCenter,
)
from .exceptions import (
    AppStoreConnectError,
    AuthenticationError,
    ConfigurationError,
    DriftDetected,
    RateLimitError,
    UpstreamError,
    ValidationError,
    NotFoundError,
    PermissionError,
    ServerError,
)
from .utils import UNKNOWN, checksum
from . import utils

__version__ = "0.1.0"

__all__ = [
    "Provider",
    "AppStoreConnectAPI",
    "TokenSource",
    "AchievementResource",
    "AchievementLocalizationResource",
    "AchievementImageResource",
    "AppDataSource",
    "AppsDataSource",
    "GameCenterDataSource",
    "Achievement",
    "AchievementLocalization",
    "AchievementImage",
    "App",
    "Apps",
    "GameCenter",
    "AppStoreConnectError",
    "AuthenticationError",
    "ConfigurationError",
    "DriftDetected",
    "RateLimitError",
    "UpstreamError",
    "ValidationError",
    "NotFoundError",
    "PermissionError",
    "ServerError",
    "UNKNOWN",
    "checksum",
    "utils",
]
