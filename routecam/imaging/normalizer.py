"""ImageNormalizer — raw camera frame → width-bounded JPEG + base64."""
import base64
import io
import logging
from contextlib import closing
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from routecam.constants import (
    DATA_URI_PREFIX,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_TARGET_WIDTH,
    JPEG_FORMAT,
    MAX_JPEG_QUALITY,
    MIN_JPEG_QUALITY,
)
from routecam.errors import DecodeError, InvalidDimensionsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    width: int
    height: int

    @property
    def base64(self) -> str:
        return base64.standard_b64encode(self.data).decode()

    @property
    def data_uri(self) -> str:
        return DATA_URI_PREFIX + self.base64


def target_size(width: int, height: int, target_width: int) -> tuple[int, int]:
    """Scale (width, height) to target_width, keeping the aspect ratio."""
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(f"cannot scale a {width}x{height} image")
    target_height = round(target_width / (width / height))
    if target_height <= 0:
        raise InvalidDimensionsError(
            f"aspect ratio of {width}x{height} is degenerate at width {target_width}"
        )
    return target_width, target_height


_DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError)


def _decode(raw: bytes) -> Image.Image:
    # The caller owns the returned image and must close it.
    try:
        image = Image.open(io.BytesIO(raw))
    except _DECODE_ERRORS as exc:
        raise DecodeError(f"cannot decode image: {exc}") from exc

    try:
        image.load()
        ImageOps.exif_transpose(image, in_place=True)
        if image.mode == "RGB":
            return image
        with closing(image):
            return image.convert("RGB")
    except _DECODE_ERRORS as exc:
        image.close()
        raise DecodeError(f"cannot decode image: {exc}") from exc


class ImageNormalizer:

    def __init__(
        self,
        target_width: int = DEFAULT_TARGET_WIDTH,
        quality: int = DEFAULT_JPEG_QUALITY,
    ) -> None:
        if target_width <= 0:
            raise ValueError(f"target_width must be positive, got {target_width}")
        if not MIN_JPEG_QUALITY <= quality <= MAX_JPEG_QUALITY:
            raise ValueError(
                f"quality must be between {MIN_JPEG_QUALITY} and {MAX_JPEG_QUALITY}, got {quality}"
            )
        self._target_width = target_width
        self._quality = quality

    @property
    def target_width(self) -> int:
        return self._target_width

    @property
    def quality(self) -> int:
        return self._quality

    def normalize(self, raw: bytes) -> EncodedImage:
        """Decode, resize and JPEG-encode raw image bytes.

        Blocking and CPU-bound; run it off the event loop. The decoded and the
        resized bitmaps are both closed before this returns, so peak memory is
        one raw image plus one resized image.
        Raises DecodeError or InvalidDimensionsError.
        """
        buffer = io.BytesIO()
        with closing(_decode(raw)) as decoded:
            size = target_size(decoded.width, decoded.height, self._target_width)
            with closing(decoded.resize(size, Image.Resampling.LANCZOS)) as resized:
                resized.save(buffer, format=JPEG_FORMAT, quality=self._quality)

        logger.debug(
            "Normalized %dx%d → %dx%d (%d bytes)",
            decoded.width, decoded.height, size[0], size[1], buffer.tell(),
        )
        return EncodedImage(data=buffer.getvalue(), width=size[0], height=size[1])
