"""
HeightfieldKit/algorithms/base.py
"""

from abc import ABC, abstractmethod


class BaseAlgorithm(ABC):
    """すべての解析アルゴリズムの基底クラス"""

    @abstractmethod
    def process(self, elevation, **params):
        """Return ``(max_height, max_diff)`` int32 grids for an elevation grid."""
        pass

    @abstractmethod
    def get_default_params(self):
        """デフォルトパラメータを返す"""
        pass
