"""
Selection access for cliphistd.

Wraps the external clipboard tools (xsel, xclip, wl-clipboard, clipnotify,
xdotool) behind small interfaces the daemon can drive and tests can fake.
"""

from clipboard.base import SelectionBackend
from clipboard.factory import get_backend_class, get_selection_backend
from clipboard.notify import ChangeNotifier
from clipboard.window import ActiveWindow

__all__ = [
    'ActiveWindow',
    'ChangeNotifier',
    'SelectionBackend',
    'get_backend_class',
    'get_selection_backend',
]
