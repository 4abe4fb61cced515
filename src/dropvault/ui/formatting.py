"""Display helpers shared by the vault pages."""

_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_file_size(size_bytes: int) -> str:
    """Human size in base 1024, at most two decimals: ``1536 -> '1.5 KB'``."""
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_UNITS[unit]}"


def file_icon(mime_type: str) -> str:
    """Emoji icon by mime family: image, pdf, anything else."""
    if "image" in mime_type:
        return "\U0001f5bc\ufe0f"
    if "pdf" in mime_type:
        return "\U0001f4d5"
    return "\U0001f4c4"
