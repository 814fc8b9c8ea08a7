"""Photos.app library access through PhotoKit (pyobjc)."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from datetime import datetime

import Photos  # type: ignore
import pyvips  # type: ignore

from imagetron.logger import get_logger

from .library import AssetLibrary, ResolvedAsset
from .transformer import decode_image

_logger = get_logger("photokit")

_AUTH_TIMEOUT_S = 300.0


class PhotoKitLibrary(AssetLibrary):
    def __init__(self, access_level: int | None = None) -> None:
        self._access_level = Photos.PHAccessLevelReadWrite if access_level is None else access_level
        self._manager = Photos.PHImageManager.defaultManager()

    def authorize(self) -> bool:
        status = Photos.PHPhotoLibrary.authorizationStatusForAccessLevel_(self._access_level)
        if status == Photos.PHAuthorizationStatusAuthorized:
            return True

        done = threading.Event()
        result: dict[str, int] = {}

        def _handler(new_status: int) -> None:
            result["status"] = new_status
            done.set()

        Photos.PHPhotoLibrary.requestAuthorizationForAccessLevel_handler_(self._access_level, _handler)
        if not done.wait(_AUTH_TIMEOUT_S):
            _logger.warning("photo library authorization timed out")
            return False
        granted = result.get("status") == Photos.PHAuthorizationStatusAuthorized
        if not granted:
            _logger.info("photo library access denied (status=%s)", result.get("status"))
        return granted

    def _request_options(self):
        options = Photos.PHImageRequestOptions.alloc().init()
        options.setSynchronous_(True)
        options.setDeliveryMode_(Photos.PHImageRequestOptionsDeliveryModeHighQualityFormat)
        # Pull the original from iCloud when it is not stored locally.
        options.setNetworkAccessAllowed_(True)
        return options

    def _image_data(self, asset, options) -> bytes | None:
        payload: dict[str, bytes] = {}

        def _handler(data, _uti, _orientation, _info) -> None:
            if data is not None:
                payload["data"] = bytes(data)

        # Synchronous request: the handler has run by the time this returns.
        self._manager.requestImageDataAndOrientationForAsset_options_resultHandler_(asset, options, _handler)
        return payload.get("data")

    @staticmethod
    def _creation_date(asset) -> datetime | None:
        date = asset.creationDate()
        if date is None:
            return None
        return datetime.fromtimestamp(date.timeIntervalSince1970())

    def resolve(self, references: Sequence[str]) -> list[ResolvedAsset]:
        if not references:
            return []

        results = Photos.PHAsset.fetchAssetsWithLocalIdentifiers_options_(list(references), None)
        total = int(results.count())
        _logger.debug("fetched %d of %d asset(s)", total, len(references))

        options = self._request_options()
        assets: list[ResolvedAsset] = []
        for i in range(total):
            asset = results.objectAtIndex_(i)
            identifier = str(asset.localIdentifier())
            data = self._image_data(asset, options)
            if not data:
                _logger.debug("no image data for %s", identifier)
                continue
            try:
                image = decode_image(data)
            except pyvips.Error as exc:
                _logger.warning("undecodable image for %s: %s", identifier, exc)
                continue
            assets.append(
                ResolvedAsset(
                    identifier=identifier,
                    image=image,
                    creation_date=self._creation_date(asset),
                    pixel_width=int(asset.pixelWidth()),
                    pixel_height=int(asset.pixelHeight()),
                )
            )
        return assets
