"""
Media helpers that classify gallery files by their path.

Files are never opened here; every decision is made from the extension, so the
helpers are safe to call on paths coming straight out of the database.
"""
import math
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

VIDEO_EXTENSIONS = ('.mp4', '.avi', '.mov', '.wmv', '.flv', '.webm', '.mkv')
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.svg', '.tiff', '.tif', '.apng')
APNG_EXTENSION = '.apng'

IMAGE_MIME_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.apng': 'image/apng',
    '.gif': 'image/gif',
    '.bmp': 'image/bmp',
    '.webp': 'image/webp',
    '.svg': 'image/svg+xml',
    '.tiff': 'image/tiff',
    '.tif': 'image/tiff'
}

VIDEO_MIME_TYPES = {
    '.mp4': 'video/mp4',
    '.avi': 'video/x-msvideo',
    '.mov': 'video/quicktime',
    '.wmv': 'video/x-ms-wmv',
    '.flv': 'video/x-flv',
    '.webm': 'video/webm',
    '.mkv': 'video/x-matroska'
}

FILE_SIZE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB', 'PB', 'EB', 'ZB', 'YB']

class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


def _file_name(path: str) -> str:
    # Paths are stored with either separator depending on the scanning host
    return PurePosixPath(path.replace('\\', '/')).name


def get_file_extension(path: str) -> str:
    '''Lower-cased extension including the leading dot, or "" when absent'''
    return PurePosixPath(_file_name(path)).suffix.lower()


def is_video_file(path: str) -> bool:
    return get_file_extension(path) in VIDEO_EXTENSIONS


def is_image_file(path: str) -> bool:
    return get_file_extension(path) in IMAGE_EXTENSIONS


def is_apng_file(path: str) -> bool:
    return get_file_extension(path) == APNG_EXTENSION


def get_media_type(path: str) -> Optional[MediaType]:
    """Classify a path as video or image, or None for unsupported files"""
    if is_video_file(path):
        return MediaType.VIDEO
    if is_image_file(path):
        return MediaType.IMAGE
    return None


def get_media_mime_type(path: str) -> Optional[str]:
    ext = get_file_extension(path)
    return IMAGE_MIME_TYPES.get(ext) or VIDEO_MIME_TYPES.get(ext)


def get_stem(path: str) -> str:
    """
    File name without its final extension.

    The comparison value for sibling media, so case is kept exactly as stored:
    ``a/b/123_ugoira.apng`` -> ``123_ugoira``.
    """
    return PurePosixPath(_file_name(path)).stem


def format_file_size(num_bytes: int, decimals: int = 1) -> str:
    """
    Human readable file size.

    Args:
        num_bytes: Size in bytes
        decimals: Digits kept after the decimal point

    Returns:
        String such as "1.5 MB"; "0 B" for an empty file
    """
    if not num_bytes or num_bytes <= 0:
        return '0 B'

    k = 1024
    digits = max(decimals, 0)
    index = min(int(math.floor(math.log(num_bytes) / math.log(k))), len(FILE_SIZE_UNITS) - 1)
    value = round(num_bytes / math.pow(k, index), digits)

    # Drop trailing zeros so 1024 renders as "1 KB"
    if value == int(value):
        value = int(value)
    return f"{value} {FILE_SIZE_UNITS[index]}"
