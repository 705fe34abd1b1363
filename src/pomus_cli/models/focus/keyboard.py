"""Cross-platform keyboard input handler for timer controls."""

import sys
from typing import Optional

# Key -> action name understood by TimerDisplay.run
KEY_BINDINGS: dict[str, str] = {
    "p": "pause",
    "r": "resume",
    "k": "skip",
    "s": "stop",
    "q": "leave",
}


def action_for_key(key: Optional[str]) -> Optional[str]:
    """Map a keypress to a timer action, or None for unbound keys."""
    if key is None:
        return None
    return KEY_BINDINGS.get(key.lower())


class KeyboardHandler:
    """Non-blocking keyboard input handler."""

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._setup()

    def _setup(self):
        """Setup terminal for non-blocking input."""
        import termios
        import tty

        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # Not a terminal (piped stdin)
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """
        Get a single keypress without blocking.

        Returns the key character or None if no key pressed.
        """
        import select

        try:
            if select.select([sys.stdin], [], [], 0)[0]:
                key = sys.stdin.read(1)
                return key.lower() or None
        except (OSError, ValueError):
            return None
        return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            import termios

            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except termios.error:
                pass


class WindowsKeyboardHandler:
    """Keyboard handler for Windows using msvcrt."""

    def __init__(self):
        import msvcrt

        self.msvcrt = msvcrt

    def get_key(self) -> Optional[str]:
        """Get key on Windows."""
        if self.msvcrt.kbhit():
            key = self.msvcrt.getch()
            if isinstance(key, bytes):
                key = key.decode("utf-8", errors="ignore")
            return key.lower() or None
        return None

    def stop(self):
        """No cleanup needed on Windows."""


def create_keyboard_handler():
    """Keyboard handler for the current platform."""
    if sys.platform == "win32":
        return WindowsKeyboardHandler()
    return KeyboardHandler()
