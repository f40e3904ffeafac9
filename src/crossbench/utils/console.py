def format_duration(seconds: float) -> str:
    """Format duration in human-readable form without decimals."""
    seconds = max(int(seconds), 0)
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    remaining = seconds % 60
    if remaining == 0:
        return f"{minutes}m"
    return f"{minutes}m{remaining}s"


def progress_bar(current: int, total: int, width: int = 30, prefix: str = "") -> str:
    """Generate a progress bar string."""
    if total <= 0:
        return f"{prefix}[" + "░" * width + f"] 0.0% (0/{total})"
    filled = int(width * current / total)
    bar = "█" * filled + "░" * (width - filled)
    percent = current / total * 100
    return f"{prefix}[{bar}] {percent:5.1f}% ({current}/{total})"


def banner(title: str, width: int = 80) -> str:
    line = "=" * width
    return f"{line}\n{title}\n{line}"
