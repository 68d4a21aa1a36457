"""Drawing targets for the render phase.

Nothing persists between frames except what the render phase redraws, so a
surface only needs to hold the commands issued since the last ``clear``.
"""

from typing import Callable, List, Optional


class DisplaySurface:
    width = 800
    height = 400

    def clear(self) -> None:
        raise NotImplementedError

    def draw_image(self, image: str, x: float, y: float, width: float, height: float) -> None:
        raise NotImplementedError

    def fill_rect(self, color: str, x: float, y: float, width: float, height: float) -> None:
        raise NotImplementedError

    def present(self) -> None:
        """Called once after a frame (or overlay) is fully drawn."""


class RecordingSurface(DisplaySurface):
    """Keeps the draw commands of the current frame as plain dicts.

    ``on_present`` receives the command list whenever a frame is finished;
    the socket layer uses it to push frames to the browser.
    """

    def __init__(self, width: int = 800, height: int = 400,
                 on_present: Optional[Callable[[List[dict]], None]] = None):
        self.width = width
        self.height = height
        self.commands: List[dict] = []
        self.frames_presented = 0
        self._on_present = on_present

    def clear(self) -> None:
        self.commands = [{'op': 'clear'}]

    def draw_image(self, image, x, y, width, height):
        self.commands.append({'op': 'image', 'image': image, 'x': x, 'y': y, 'w': width, 'h': height})

    def fill_rect(self, color, x, y, width, height):
        self.commands.append({'op': 'rect', 'color': color, 'x': x, 'y': y, 'w': width, 'h': height})

    def present(self):
        self.frames_presented += 1
        if self._on_present is not None:
            self._on_present(list(self.commands))

    def images(self) -> List[str]:
        return [c['image'] for c in self.commands if c['op'] == 'image']
