"""
Selection backend factory.

Picks the first clipboard tool available in this session.
"""

import os
import shutil
from typing import Type

from clipboard.base import SelectionBackend
from clipboard.linux import WaylandBackend, XclipBackend, XselBackend


def get_backend_class() -> Type[SelectionBackend]:
    """
    Get the SelectionBackend implementation for the current session.

    Returns:
        Type[SelectionBackend]: Wayland tools when a Wayland display is
        present, otherwise xsel, otherwise xclip

    Raises:
        RuntimeError: If none of the supported tools is installed
    """
    if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-paste"):
        return WaylandBackend
    if shutil.which("xsel"):
        return XselBackend
    if shutil.which("xclip"):
        return XclipBackend
    raise RuntimeError(
        "No clipboard backend found. Install one of: wl-clipboard, xsel, or xclip.")


def get_selection_backend() -> SelectionBackend:
    backend_class = get_backend_class()
    return backend_class()
