from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class InvalidCoverImage(ValueError):
    pass


def inspect_image(content: bytes) -> Tuple[str, Tuple[int, int]]:
    """Return (format, (width, height)) for image bytes.

    Raises InvalidCoverImage if Pillow cannot decode the content.
    """
    if not content:
        raise InvalidCoverImage("empty upload")
    try:
        with Image.open(BytesIO(content)) as img:
            fmt = (img.format or "").upper()
            size = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidCoverImage(f"not a readable image: {e}") from e
    return fmt, size
