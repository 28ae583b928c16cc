"""Media link helpers for content previews.

Media is linked, never fetched or processed: these helpers only rewrite
hosted-media URLs into something an <img> tag can display and guess
whether a link points at a video.
"""

VIDEO_EXTENSIONS = (".mp4", ".mov", ".avi", ".wmv", ".flv", ".mkv")

_DRIVE_HOST = "drive.google.com"
_DRIVE_FILE_MARKER = "/file/d/"


def drive_file_id(url: str) -> str | None:
    """Extract the file id from a https://drive.google.com/file/d/<id>/view link."""
    if _DRIVE_HOST not in url or _DRIVE_FILE_MARKER not in url:
        return None
    file_id = url.split(_DRIVE_FILE_MARKER, 1)[1].split("/", 1)[0]
    # strip query strings such as ?usp=sharing
    file_id = file_id.split("?", 1)[0]
    return file_id or None


def preview_url(url: str | None) -> str:
    """Return a directly displayable URL for the given media link."""
    if not url:
        return ""
    file_id = drive_file_id(url)
    if file_id:
        return f"https://{_DRIVE_HOST}/uc?export=view&id={file_id}"
    return url


def is_video(url: str | None) -> bool:
    if not url:
        return False
    lowered = url.lower()
    if _DRIVE_HOST in url and "video" in lowered:
        return True
    return any(ext in lowered for ext in VIDEO_EXTENSIONS)
