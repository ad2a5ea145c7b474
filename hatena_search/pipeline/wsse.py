"""
Pipeline - WSSE Signer

Builds the X-WSSE UsernameToken header used by the Hatena Bookmark API.
"""

import base64
import hashlib
import secrets
from datetime import datetime, timezone
from typing import Dict, Optional

AUTHORIZATION_HEADER = 'WSSE profile="UsernameToken"'
NONCE_RANGE = 10 ** 14


class WSSESigner:
    """Signs requests with a fresh nonce and timestamp on every call."""

    def __init__(self, username: str, api_key: str):
        self.username = username
        self.api_key = api_key

    @staticmethod
    def _nonce() -> bytes:
        seed = str(secrets.randbelow(NONCE_RANGE))
        return hashlib.sha1(seed.encode("ascii")).digest()

    def header_value(self, now: Optional[datetime] = None) -> str:
        """
        Build the X-WSSE header value.

        Args:
            now: Timestamp to sign (default: current UTC time)

        Returns:
            UsernameToken string with Username, PasswordDigest, Nonce, Created
        """
        now = now or datetime.now(timezone.utc)
        created = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        nonce = self._nonce()

        digest = hashlib.sha1(
            nonce + created.encode("ascii") + self.api_key.encode("utf-8")
        ).digest()

        return (
            f'UsernameToken Username="{self.username}", '
            f'PasswordDigest="{base64.b64encode(digest).decode("ascii")}", '
            f'Nonce="{base64.b64encode(nonce).decode("ascii")}", '
            f'Created="{created}"'
        )

    def build_headers(self) -> Dict[str, str]:
        """Both authentication headers for one request."""
        return {
            "Authorization": AUTHORIZATION_HEADER,
            "X-WSSE": self.header_value(),
        }
