import math


def format_time(seconds) -> str:
    """Render a playback position as ``M:SS``, or ``H:MM:SS`` past an hour.

    Unknown, negative or non-finite values render as ``0:00``.
    """
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return '0:00'
    if not math.isfinite(value) or value < 0:
        return '0:00'
    total = int(value)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f'{hours}:{minutes:02d}:{secs:02d}'
    return f'{minutes}:{secs:02d}'
