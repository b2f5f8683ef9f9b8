"""Quick Answer - Arabic voice questions to answers on wearable glasses"""

from quickanswer.__version__ import __version__

__all__ = ["__version__"]
