import os
from dataclasses import dataclass
from typing import Dict, Optional

from .state import CANVAS_WIDTH

# name -> (file, drawn width); the background tiles at its own width
ASSET_MANIFEST = {
    'background': ('env0.png', CANVAS_WIDTH),
    'player': ('sprite1.png', 50),
    'wall-tall': ('wallSprite.png', 40),
    'wall-medium': ('wallSprite1.png', 40),
    'wall-short': ('wallSprite2.png', 40),
    'spike': ('spikeSprite.png', 20),
}


class AssetLoadError(RuntimeError):
    pass


@dataclass(frozen=True)
class Asset:
    name: str
    url: str
    width: int


class AssetLoader:
    """Resolves every named image up front; one missing file fails the whole load."""

    def __init__(self, asset_dir: str, url_prefix: str = 'imgs', manifest: Optional[Dict[str, tuple]] = None):
        self.asset_dir = asset_dir
        self.url_prefix = url_prefix.rstrip('/')
        self.manifest = dict(manifest or ASSET_MANIFEST)

    def load_all(self) -> Dict[str, Asset]:
        missing = []
        assets = {}
        for name, (filename, width) in self.manifest.items():
            if not os.path.isfile(os.path.join(self.asset_dir, filename)):
                missing.append(filename)
                continue
            assets[name] = Asset(name=name, url=f'{self.url_prefix}/{filename}', width=width)
        if missing:
            raise AssetLoadError(f"missing game assets in {self.asset_dir}: {', '.join(sorted(missing))}")
        return assets
