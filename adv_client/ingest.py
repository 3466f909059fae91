"""
Module: adv_client.ingest
Purpose: Accept a user's image selection and hold it for preview and submission
Dependencies: PIL, pathlib

The ingestor only checks that the content decodes as an image. It never
resizes, crops or converts; the generation service decides what input it
accepts.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union
import logging
import struct

from PIL import Image, UnidentifiedImageError

from adv_client.errors import ValidationError
from adv_client.models.entities import UploadedImage
from adv_client.utils.encoding import to_data_url

logger = logging.getLogger(__name__)

Selection = Union[str, Path, bytes, None]


class ImageIngestor:
    """
    Owner of the currently uploaded image.

    A successful `ingest` replaces the held image wholesale; a failed one
    leaves it untouched.

    Example:
        >>> ingestor = ImageIngestor()
        >>> image = ingestor.ingest("digit_7.png")
        >>> image.preview_encoding[:22]
        'data:image/png;base64,'
    """

    def __init__(self):
        self._current: Optional[UploadedImage] = None

    @property
    def current(self) -> Optional[UploadedImage]:
        return self._current

    def ingest(
        self,
        selection: Selection,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> UploadedImage:
        """
        Validate a selection and make it the current image.

        Args:
            selection: Path to an image file, its raw bytes, or None
            filename: Name to send with the upload (default: file name or "image.<ext>")
            content_type: MIME type (default: derived from the decoded format)

        Returns:
            The new UploadedImage

        Raises:
            ValidationError: If nothing was selected or the content is not an image
        """
        if selection is None:
            raise ValidationError("Please upload an image first")

        if isinstance(selection, (str, Path)):
            path = Path(selection)
            if not path.is_file():
                raise ValidationError(f"File not found: {path}")
            raw = path.read_bytes()
            filename = filename or path.name
        else:
            raw = bytes(selection)

        if not raw:
            raise ValidationError("Selected file is empty")

        image_format = self._detect_format(raw)
        mime = content_type or Image.MIME.get(image_format, "application/octet-stream")
        if filename is None:
            filename = f"image.{image_format.lower()}"

        uploaded = UploadedImage(
            raw_bytes=raw,
            preview_encoding=to_data_url(raw, mime),
            filename=filename,
            content_type=mime,
        )
        self._current = uploaded
        logger.info(f"Ingested {filename} ({len(raw)} bytes, {mime})")
        return uploaded

    def clear(self) -> None:
        """Forget the current image."""
        self._current = None

    @staticmethod
    def _detect_format(raw: bytes) -> str:
        """
        Decode just enough of the content to identify its image format.

        Raises:
            ValidationError: If Pillow cannot identify or verify the image
        """
        try:
            with Image.open(BytesIO(raw)) as img:
                image_format = img.format or "PNG"
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, struct.error) as e:
            logger.warning(f"Rejected selection: {e}")
            raise ValidationError("Selected file is not a readable image") from e
        return image_format
