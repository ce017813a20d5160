"""
Media storage on the Cloudinary CDN, plus an in-memory test implementation.

Uploads go through an unsigned upload preset; delivery URLs carry the
resizing/thumbnail transformations so the CDN does the image work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Literal, Optional, Protocol

import requests

from shared.api import UploadedMedia

logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "needyou/jobs"
REQUEST_TIMEOUT_SECONDS = 60

CropMode = Literal["fill", "fit", "scale", "thumb"]


class StorageError(Exception):
    pass


CONFIG_MISSING_MESSAGE = (
    "Cloudinary configuration missing. Please check environment variables."
)


def _error_message(response: requests.Response, fallback: str) -> str:
    try:
        error = response.json().get("error") or {}
    except ValueError:
        return fallback
    return error.get("message") or fallback


class StorageClient(Protocol):
    """Defines the operations the API needs from the media CDN."""

    def upload(self, filename: str, content: BinaryIO, content_type: str) -> UploadedMedia:
        ...

    def optimized_image_url(
        self,
        public_id: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        crop: CropMode = "fill",
        quality: str | int = "auto",
    ) -> str:
        ...

    def video_thumbnail_url(self, public_id: str) -> str:
        ...

    def video_url(self, public_id: str) -> str:
        ...


@dataclass
class CloudinaryUrls:
    """Delivery URL builders shared by the real and in-memory clients."""

    cloud_name: str

    @property
    def delivery_base(self) -> str:
        if not self.cloud_name:
            raise StorageError(CONFIG_MISSING_MESSAGE)
        return f"https://res.cloudinary.com/{self.cloud_name}"

    def optimized_image_url(
        self,
        public_id: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        crop: CropMode = "fill",
        quality: str | int = "auto",
    ) -> str:
        transformation = f"q_{quality}"
        if width:
            transformation += f",w_{width}"
        if height:
            transformation += f",h_{height}"
        if width or height:
            transformation += f",c_{crop}"
        return f"{self.delivery_base}/image/upload/{transformation}/{public_id}"

    def video_thumbnail_url(self, public_id: str) -> str:
        return f"{self.delivery_base}/video/upload/so_0,w_400,h_300,c_fill/{public_id}.jpg"

    def video_url(self, public_id: str) -> str:
        return f"{self.delivery_base}/video/upload/{public_id}"

    def _with_thumbnail(self, media: UploadedMedia) -> UploadedMedia:
        if media.resource_type == "video":
            media.thumbnail_url = self.video_thumbnail_url(media.public_id)
        return media


@dataclass
class InMemoryStorageClient(CloudinaryUrls):
    """Test double for media uploads."""

    cloud_name: str = "needyou-test"
    stored_objects: dict[str, bytes] = field(default_factory=dict)

    def upload(self, filename: str, content: BinaryIO, content_type: str) -> UploadedMedia:
        resource_type = "video" if content_type.startswith("video/") else "image"
        stem, _, extension = filename.rpartition(".")
        public_id = f"{UPLOAD_FOLDER}/{stem or extension}_{len(self.stored_objects) + 1}"
        self.stored_objects[public_id] = content.read()
        return self._with_thumbnail(
            UploadedMedia(
                public_id=public_id,
                secure_url=f"{self.delivery_base}/{resource_type}/upload/{public_id}",
                resource_type=resource_type,
                format=extension if stem else None,
            )
        )


@dataclass
class CloudinaryStorageClient(CloudinaryUrls):
    """
    Cloudinary client using unsigned uploads.
    """

    upload_preset: str = ""

    def upload(self, filename: str, content: BinaryIO, content_type: str) -> UploadedMedia:
        if not self.cloud_name or not self.upload_preset:
            raise StorageError(CONFIG_MISSING_MESSAGE)
        try:
            response = requests.post(
                f"https://api.cloudinary.com/v1_1/{self.cloud_name}/auto/upload",
                data={"upload_preset": self.upload_preset, "folder": UPLOAD_FOLDER},
                files={"file": (filename, content, content_type)},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.exception("Cloudinary upload of %s failed", filename)
            raise StorageError("Failed to upload file") from e

        if not response.ok:
            message = _error_message(response, "Upload failed")
            logger.warning("Cloudinary rejected %s: %s", filename, message)
            raise StorageError(message)

        data = response.json()
        logger.info("Uploaded %s as %s", filename, data.get("public_id"))
        return self._with_thumbnail(
            UploadedMedia(
                public_id=data["public_id"],
                secure_url=data["secure_url"],
                resource_type=data["resource_type"],
                format=data.get("format"),
                width=data.get("width"),
                height=data.get("height"),
                duration=data.get("duration"),
            )
        )
