"""Embedded image extraction (pymupdf) and JPEG decoding (Pillow)."""

import io

import fitz  # pymupdf
from PIL import Image

from .errors import DecodeError, ExtractionError


def extract_page_image(pdf: fitz.Document, xref: int) -> bytes:
    """Return the raw stream bytes of an embedded image.
    
    Args:
        pdf: Open pymupdf Document
        xref: Cross-reference number of the image object
        
    Raises:
        ExtractionError: If the object is not an extractable image
    """
    try:
        info = pdf.extract_image(xref)
    except Exception as e:
        raise ExtractionError(f"Failed to extract image xref={xref}: {e}") from e
    
    if not info or not info.get("image"):
        raise ExtractionError(f"No image data for xref={xref}")
    return info["image"]


def decode_jpeg(data: bytes) -> Image.Image:
    """Decode a JPEG byte buffer into a Pillow image.
    
    Raises:
        DecodeError: If the buffer is not a JPEG or cannot be decoded
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e
    
    if image.format != "JPEG":
        fmt = image.format
        image.close()
        raise DecodeError(f"Image is not a JPEG (format={fmt})")
    return image
