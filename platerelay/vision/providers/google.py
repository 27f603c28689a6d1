"""Google Cloud Vision provider — TEXT_DETECTION + LABEL_DETECTION in one request."""

from __future__ import annotations

import asyncio

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import vision

from platerelay.errors import UpstreamError
from platerelay.vision.base import Label, VisionProvider, VisionResponse

FEATURES = (
    vision.Feature.Type.TEXT_DETECTION,
    vision.Feature.Type.LABEL_DETECTION,
)


class GoogleVisionProvider(VisionProvider):
    def __init__(self, credentials_file: str = "") -> None:
        self._credentials_file = credentials_file
        self._client: vision.ImageAnnotatorClient | None = None

    def _get_client(self) -> vision.ImageAnnotatorClient:
        if not self._client:
            if self._credentials_file:
                self._client = vision.ImageAnnotatorClient.from_service_account_file(self._credentials_file)
            else:
                self._client = vision.ImageAnnotatorClient()
        return self._client

    def _annotate(self, client: vision.ImageAnnotatorClient, image: bytes) -> vision.AnnotateImageResponse:
        request = vision.AnnotateImageRequest(
            image=vision.Image(content=image),
            features=[vision.Feature(type_=feature) for feature in FEATURES],
        )
        batch = client.batch_annotate_images(requests=[request])
        return batch.responses[0]

    async def detect(self, image: bytes) -> VisionResponse:
        try:
            # built on the event loop so concurrent first requests share one client
            client = self._get_client()
            result = await asyncio.to_thread(self._annotate, client, image)
        except google_exceptions.GoogleAPIError as e:
            raise UpstreamError(getattr(e, "message", "") or str(e), provider="google") from e
        except (auth_exceptions.GoogleAuthError, OSError) as e:
            # missing key file or no application default credentials
            raise UpstreamError(str(e), provider="google") from e

        # per-image failures come back inside a successful batch
        if result.error.message:
            raise UpstreamError(result.error.message, provider="google")

        return VisionResponse(
            text=result.full_text_annotation.text or None,
            labels=[Label(a.description, a.score) for a in result.label_annotations],
            provider="google",
        )

    async def close(self) -> None:
        if self._client:
            self._client.transport.close()
            self._client = None

    def name(self) -> str:
        return "google"
