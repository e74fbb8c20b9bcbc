import logging
from typing import Optional
from urllib.parse import quote

import requests

from prompty.config import STORAGE, SUPABASE
from prompty.utils.exceptions import StorageError

logger = logging.getLogger(__name__)


class StorageClient:
    """Thin client for the Supabase Storage object API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        bucket: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url if base_url is not None else SUPABASE.URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE.KEY
        self.bucket = bucket or STORAGE.BUCKET
        self.session = session or requests.Session()

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str = STORAGE.CACHE_CONTROL,
        upsert: bool = False,
    ) -> str:
        """
        Upload ``data`` to ``path`` in the bucket.

        Args:
            path: Object path inside the bucket
            data: Raw file content
            content_type: MIME type stored with the object
            cache_control: Max-age in seconds served with the object
            upsert: Overwrite an existing object at the same path

        Returns:
            The object path

        Raises:
            StorageError: If the storage backend rejects the upload
        """
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(path)}"
        headers = {
            **self._auth_headers(),
            "Content-Type": content_type,
            "cache-control": f"max-age={cache_control}",
            "x-upsert": "true" if upsert else "false",
        }
        logger.info(f"Uploading {len(data)} bytes to {self.bucket}/{path}")
        response = self.session.post(url, data=data, headers=headers)
        if not response.ok:
            raise StorageError(self._error_message(response), status_code=response.status_code)
        return path

    def create_bucket(self, public: bool = True) -> None:
        url = f"{self.base_url}/storage/v1/bucket"
        payload = {"id": self.bucket, "name": self.bucket, "public": public}
        response = self.session.post(url, json=payload, headers=self._auth_headers())
        if not response.ok:
            raise StorageError(self._error_message(response), status_code=response.status_code)

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}{SUPABASE.PUBLIC_OBJECT_PATH}{self.bucket}/{quote(path)}"

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}", "apikey": self.api_key}

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
            if message:
                return str(message)
        return response.text or f"Storage request failed with status {response.status_code}"


def get_storage_client():
    client = StorageClient()
    try:
        yield client
    finally:
        client.session.close()
