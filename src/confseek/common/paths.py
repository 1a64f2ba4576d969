"""Standard directory locations for confseek."""

from __future__ import annotations

import os
from pathlib import Path

from confseek.constants import APP_NAME


def get_data_directory(app_name: str = APP_NAME) -> Path:
    """Get XDG data directory.

    Returns ~/.local/share/{app_name} (or XDG_DATA_HOME/{app_name} if set).
    """
    xdg_data = os.getenv("XDG_DATA_HOME")
    base_dir = Path(xdg_data).expanduser() if xdg_data else Path.home() / ".local" / "share"
    return base_dir / app_name
