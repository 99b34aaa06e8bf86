"""Image hosting on Cloudinary.

Every file in a request is checked with Pillow before the first upload, so a
bad file never leaves part of a batch behind. Cloudinary bounds images to
1200x1200 and picks quality and format on delivery. Assets live under
``<UPLOAD_ROOT_FOLDER>/<folder>/`` and are deleted by Cloudinary public id.
"""

import logging

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from django.conf import settings
from django.utils.text import slugify
from PIL import Image, UnidentifiedImageError
from rest_framework.exceptions import ValidationError

from backend.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True,
)

TRANSFORMATION = [
    {"width": 1200, "height": 1200, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


def validate_image_files(files):
    if not files:
        raise ValidationError("No files uploaded")

    if len(files) > settings.MAX_UPLOAD_FILES:
        raise ValidationError(
            f"Too many files: at most {settings.MAX_UPLOAD_FILES} images per request"
        )

    for f in files:
        if not (f.content_type or "").startswith("image/"):
            raise ValidationError(f"Only image files are allowed ({f.name})")
        if f.size > settings.MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"{f.name} exceeds the {settings.MAX_UPLOAD_SIZE} byte upload limit"
            )
        verify_image(f)


def verify_image(uploaded_file):
    try:
        with Image.open(uploaded_file) as image:
            image.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        logger.warning(f"[Upload] Rejected {uploaded_file.name}: {e}")
        raise ValidationError(f"{uploaded_file.name} is not a valid image")
    finally:
        uploaded_file.seek(0)


def clean_folder(folder):
    parts = [slugify(part) for part in str(folder or "").split("/")]
    return "/".join(part for part in parts if part) or "general"


def upload_folder(folder):
    return f"{settings.UPLOAD_ROOT_FOLDER}/{clean_folder(folder)}"


def upload_image(uploaded_file, folder):
    try:
        result = cloudinary.uploader.upload(
            uploaded_file,
            folder=upload_folder(folder),
            resource_type="image",
            transformation=TRANSFORMATION,
        )
    except cloudinary.exceptions.Error as e:
        logger.error(f"[Upload] Cloudinary upload failed for {uploaded_file.name}: {e}")
        raise ExternalServiceError("Failed to upload images")

    logger.info(f"[Upload] Stored {result['public_id']} ({result['width']}x{result['height']})")
    return {
        "url": result["secure_url"],
        "public_id": result["public_id"],
        "width": result["width"],
        "height": result["height"],
    }


def upload_images(files, folder):
    """Upload a validated batch; on failure, remove what was already stored."""
    results = []
    try:
        for f in files:
            results.append(upload_image(f, folder))
    except ExternalServiceError:
        discard_uploads(results)
        raise
    return results


def discard_uploads(results):
    for result in results:
        try:
            cloudinary.uploader.destroy(result["public_id"], resource_type="image")
        except cloudinary.exceptions.Error as e:
            logger.error(f"[Upload] Could not discard {result['public_id']}: {e}")


def check_public_id(public_id):
    root = f"{settings.UPLOAD_ROOT_FOLDER}/"
    if not isinstance(public_id, str) or not public_id.startswith(root) or ".." in public_id:
        raise ValidationError(f"public_id must be an asset under {root}")
    return public_id


def delete_image(public_id):
    check_public_id(public_id)
    try:
        result = cloudinary.uploader.destroy(public_id, resource_type="image")
    except cloudinary.exceptions.Error as e:
        logger.error(f"[Upload] Cloudinary delete failed for {public_id}: {e}")
        raise ExternalServiceError("Failed to delete image")

    logger.info(f"[Upload] Deleted {public_id}: {result.get('result')}")
    return result
