# plugins/core_assets/classifier.py

from .models import AssetCategory

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg"})


def extension_of(file_name: str) -> str:
    """Lower-cased text after the last dot; the whole name when there is no dot."""
    return file_name.rsplit(".", 1)[-1].lower()


def classify(file_name: str) -> AssetCategory:
    ext = extension_of(file_name)
    if ext in IMAGE_EXTENSIONS:
        return AssetCategory.IMAGE
    if ext in AUDIO_EXTENSIONS:
        return AssetCategory.AUDIO
    return AssetCategory.OTHER
