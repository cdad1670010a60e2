"""
Configuration settings related to image processing.
"""

IMAGE_EXTENSIONS = (
    ".jpg", ".jpeg", ".jfif", ".png", ".heif", ".heic", ".webp", ".avif",
)

# Quality on the 0-100 scale of the image engine.
IMAGE_QUALITY = {"quality": 95, "normal": 85}
