"""
HTTP client for all API interactions
"""
import mimetypes
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, List, Optional, Union

import httpx

from upload_cli.config import Config
from upload_cli.models import AbortedUpload, PolicyInfo, UploadResult


def guess_mime_type(path: Path) -> str:
    """Content type a browser would declare for this file name"""
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


class APIClient:
    """Client for interacting with the upload gate API"""

    def __init__(self, config: Config):
        self.base_url = config.api_base_url.rstrip("/")
        self.timeout = config.api_timeout

    async def upload(
        self,
        paths: List[Path],
        field_name: str = "file",
        fields: Optional[Dict[str, str]] = None,
    ) -> Union[UploadResult, AbortedUpload]:
        """
        Upload files as one multipart request

        Returns:
            UploadResult for 201/422 answers, AbortedUpload when the API
            aborted the request on its first rejected part
        """
        with ExitStack() as stack:
            files = [
                (field_name, (path.name, stack.enter_context(open(path, "rb")), guess_mime_type(path)))
                for path in paths
            ]
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/uploads", files=files, data=fields or {}
                )

        if response.status_code in (201, 422):
            return UploadResult(**response.json())
        if response.status_code in (400, 413, 415):
            return AbortedUpload(**response.json())
        response.raise_for_status()
        return UploadResult(**response.json())

    async def get_policy(self) -> PolicyInfo:
        """Get the active limits and allow-lists"""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(f"{self.base_url}/policy")
            response.raise_for_status()
            return PolicyInfo(**response.json())
