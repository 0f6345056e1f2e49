"""
Apple App Store Connect API client.

This module provides the token source and HTTP client used by the
provider's resources and data sources to manage apps, Game Center
details, achievements, achievement localizations and achievement images.
"""

import jwt
import threading
import requests
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from ratelimit import limits, sleep_and_retry
import logging

from .exceptions import (
    AppStoreConnectError,
    AuthenticationError,
    RateLimitError,
    ValidationError,
    NotFoundError,
    PermissionError,
    ServerError,
)
from .utils import slice_upload

logger = logging.getLogger(__name__)


class TokenSource:
    """
    Issues signed bearer tokens for the App Store Connect API.

    Args:
        key_id: Private key ID from App Store Connect, e.g. 2X9R4HXF34
        issuer_id: Issuer ID from the API Keys page in App Store Connect
        private_key: PEM-encoded private key text
        expire_after: Token lifetime in seconds
    """

    AUDIENCE = "appstoreconnect-v1"
    REFRESH_MARGIN = 10

    def __init__(
        self,
        key_id: str,
        issuer_id: str,
        private_key: str,
        expire_after: int = 60,
    ):
        for attribute, value in (
            ("key_id", key_id),
            ("issuer_id", issuer_id),
            ("private_key", private_key),
        ):
            if not value:
                raise ValidationError(attribute, "Missing token source parameter")

        self.key_id = key_id
        self.issuer_id = issuer_id
        self.expire_after = expire_after
        self._private_key = self._load_private_key(private_key)
        self._token: Optional[str] = None
        self._token_expiry: Optional[int] = None
        self._lock = threading.Lock()

    @staticmethod
    def _load_private_key(private_key: str):
        """Parse the PEM private key."""
        try:
            key = serialization.load_pem_private_key(
                private_key.encode("utf-8"), password=None
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise AuthenticationError(f"Failed to load private key: {e}")

        if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(
            key.curve, ec.SECP256R1
        ):
            raise AuthenticationError(
                "Failed to load private key: expected an EC P-256 key"
            )
        return key

    def token(self) -> str:
        """Return a valid JWT, reusing the cached one until it nearly expires."""
        with self._lock:
            current_time = int(datetime.now(timezone.utc).timestamp())

            if self._token and self._token_expiry and current_time < self._token_expiry:
                return self._token

            expiry = current_time + self.expire_after
            payload = {
                "iss": self.issuer_id,
                "iat": current_time,
                "exp": expiry,
                "aud": self.AUDIENCE,
            }
            headers = {"alg": "ES256", "kid": self.key_id, "typ": "JWT"}

            try:
                self._token = jwt.encode(
                    payload, self._private_key, algorithm="ES256", headers=headers
                )
            except Exception as e:
                raise AuthenticationError(f"Failed to generate JWT token: {e}")

            self._token_expiry = expiry - self.REFRESH_MARGIN
            return self._token


class AppStoreConnectAPI:
    """
    Apple App Store Connect API client.

    One instance is shared by every resource and data source of a
    configured provider. The only state it keeps is the token cache of its
    token source.

    Args:
        token_source: Issues the bearer tokens for every request
    """

    BASE_URL = "https://api.appstoreconnect.apple.com/v1"
    TIMEOUT = 30

    def __init__(self, token_source: TokenSource):
        self.token_source = token_source

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests."""
        return {
            "Authorization": f"Bearer {self.token_source.token()}",
            "Content-Type": "application/json",
        }

    def _make_request_raw(
        self,
        method: str = "GET",
        url: Optional[str] = None,
        endpoint: Optional[str] = None,
        params: Optional[Dict] = None,
        data: Optional[Dict] = None,
    ) -> requests.Response:
        """Make a request to the API and map error statuses to exceptions."""
        if url is None and endpoint is not None:
            url = f"{self.BASE_URL}{endpoint}"
        elif url is None:
            raise ValueError("Either url or endpoint must be provided")

        headers = self._get_headers()

        logger.debug(f"_make_request: {method} {url}")
        if params:
            logger.debug(f"_make_request: params={params}")

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=data,
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"_make_request: Request failed: {e}")
            raise AppStoreConnectError(f"Request failed: {e}")

        logger.debug(f"_make_request: Response received - status={response.status_code}")

        if response.status_code == 401:
            raise AuthenticationError("Authentication failed - check credentials")
        elif response.status_code == 403:
            raise PermissionError("Insufficient permissions for this operation")
        elif response.status_code == 404:
            raise NotFoundError("Requested resource not found")
        elif response.status_code == 429:
            raise RateLimitError("Rate limit exceeded")
        elif response.status_code >= 400:
            try:
                error_data = response.json()
                error_msg = error_data.get("errors", [{}])[0].get(
                    "detail", response.text
                )
            except Exception:
                error_msg = response.text
            logger.error(f"API Error {response.status_code}: {error_msg}")
            if response.status_code >= 500:
                raise ServerError(f"API Error {response.status_code}: {error_msg}")
            raise AppStoreConnectError(f"API Error {response.status_code}: {error_msg}")

        return response

    @sleep_and_retry
    @limits(calls=3500, period=3600)  # Apple's rate limit
    def _make_request(self, *args, **kwargs) -> requests.Response:
        """Rate-limited wrapper for _make_request_raw."""
        return self._make_request_raw(*args, **kwargs)

    def _get(self, endpoint: str) -> Dict[str, Any]:
        response = self._make_request(method="GET", endpoint=endpoint)
        return response.json()["data"]

    def _post(self, endpoint: str, data: Dict) -> Dict[str, Any]:
        response = self._make_request(method="POST", endpoint=endpoint, data=data)
        return response.json()["data"]

    def _patch(self, endpoint: str, data: Dict) -> Dict[str, Any]:
        response = self._make_request(method="PATCH", endpoint=endpoint, data=data)
        return response.json()["data"]

    def _delete(self, endpoint: str) -> None:
        self._make_request(method="DELETE", endpoint=endpoint)

    # ===== APPS =====

    def get_app(self, app_id: str) -> Dict[str, Any]:
        """Get a specific app."""
        return self._get(f"/apps/{app_id}")

    def list_apps(self) -> List[Dict[str, Any]]:
        """Get all apps for the account, following pagination links."""
        apps: List[Dict[str, Any]] = []
        response = self._make_request(method="GET", endpoint="/apps")
        while True:
            document = response.json()
            apps.extend(document.get("data", []))
            next_url = document.get("links", {}).get("next")
            if not next_url:
                break
            response = self._make_request(method="GET", url=next_url)
        logger.debug(f"list_apps: Found {len(apps)} apps")
        return apps

    # ===== GAME CENTER =====

    def get_game_center_for_app(self, app_id: str) -> Dict[str, Any]:
        """Get the Game Center detail of an app."""
        return self._get(f"/apps/{app_id}/gameCenterDetail")

    def get_game_center(self, game_center_id: str) -> Dict[str, Any]:
        """Get a Game Center detail by its identifier."""
        return self._get(f"/gameCenterDetails/{game_center_id}")

    # ===== ACHIEVEMENTS =====

    def get_achievement(self, achievement_id: str) -> Dict[str, Any]:
        """Get a Game Center achievement."""
        return self._get(f"/gameCenterAchievements/{achievement_id}")

    def create_achievement(
        self, game_center_id: str, attributes: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Create a Game Center achievement.

        Args:
            game_center_id: Game Center detail to attach the achievement to
            attributes: referenceName, vendorIdentifier, points, repeatable
                and showBeforeEarned

        Returns:
            The created achievement resource object
        """
        data = {
            "data": {
                "type": "gameCenterAchievements",
                "attributes": attributes,
                "relationships": {
                    "gameCenterDetail": {
                        "data": {"type": "gameCenterDetails", "id": game_center_id}
                    }
                },
            }
        }
        return self._post("/gameCenterAchievements", data)

    def update_achievement(
        self, achievement_id: str, attributes: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Update mutable attributes of a Game Center achievement."""
        data = {
            "data": {
                "type": "gameCenterAchievements",
                "id": achievement_id,
                "attributes": attributes,
            }
        }
        return self._patch(f"/gameCenterAchievements/{achievement_id}", data)

    def delete_achievement(self, achievement_id: str) -> None:
        """Delete a Game Center achievement."""
        self._delete(f"/gameCenterAchievements/{achievement_id}")

    # ===== ACHIEVEMENT LOCALIZATIONS =====

    def get_achievement_localization(self, localization_id: str) -> Dict[str, Any]:
        """Get an achievement localization."""
        return self._get(f"/gameCenterAchievementLocalizations/{localization_id}")

    def create_achievement_localization(
        self, achievement_id: str, attributes: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Create an achievement localization (name and descriptions for a locale)."""
        data = {
            "data": {
                "type": "gameCenterAchievementLocalizations",
                "attributes": attributes,
                "relationships": {
                    "gameCenterAchievement": {
                        "data": {"type": "gameCenterAchievements", "id": achievement_id}
                    }
                },
            }
        }
        return self._post("/gameCenterAchievementLocalizations", data)

    def delete_achievement_localization(self, localization_id: str) -> None:
        """Delete an achievement localization."""
        self._delete(f"/gameCenterAchievementLocalizations/{localization_id}")

    # ===== ACHIEVEMENT IMAGES =====

    def get_achievement_image(self, image_id: str) -> Dict[str, Any]:
        """Get an achievement image."""
        return self._get(f"/gameCenterAchievementImages/{image_id}")

    def create_achievement_image(
        self, localization_id: str, file_name: str, data: bytes
    ) -> Dict[str, Any]:
        """
        Upload an image for an achievement localization.

        The upload is a three step flow: reserve the asset, send every
        upload operation the reservation returns, then commit.

        Args:
            localization_id: Achievement localization the image belongs to
            file_name: Name reported to App Store Connect
            data: Image content

        Returns:
            The committed image resource object
        """
        reservation = {
            "data": {
                "type": "gameCenterAchievementImages",
                "attributes": {"fileName": file_name, "fileSize": len(data)},
                "relationships": {
                    "gameCenterAchievementLocalization": {
                        "data": {
                            "type": "gameCenterAchievementLocalizations",
                            "id": localization_id,
                        }
                    }
                },
            }
        }
        image = self._post("/gameCenterAchievementImages", reservation)
        image_id = image["id"]
        operations = image.get("attributes", {}).get("uploadOperations") or []

        logger.info(
            f"create_achievement_image: Uploading {file_name} "
            f"({len(data)} bytes, {len(operations)} ops)"
        )
        for operation in operations:
            self._upload_part(operation, data)

        commit = {
            "data": {
                "type": "gameCenterAchievementImages",
                "id": image_id,
                "attributes": {"uploaded": True},
            }
        }
        return self._patch(f"/gameCenterAchievementImages/{image_id}", commit)

    def _upload_part(self, operation: Dict[str, Any], data: bytes) -> None:
        """Send one upload operation of an asset reservation."""
        headers = {h["name"]: h["value"] for h in operation.get("requestHeaders", [])}
        chunk = slice_upload(
            data, operation.get("offset", 0), operation.get("length", len(data))
        )

        try:
            response = requests.request(
                method=operation.get("method", "PUT"),
                url=operation["url"],
                headers=headers,
                data=chunk,
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise AppStoreConnectError(f"Upload failed: {e}")

        if response.status_code not in (200, 201, 204):
            raise AppStoreConnectError(
                f"Upload failed with status {response.status_code}: {response.text[:300]}"
            )

    def delete_achievement_image(self, image_id: str) -> None:
        """Delete an achievement image."""
        self._delete(f"/gameCenterAchievementImages/{image_id}")
