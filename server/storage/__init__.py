from .assets import AssetCache

__all__ = ["AssetCache"]
