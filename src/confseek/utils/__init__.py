from .dicts import deep_merge, merge_layers

__all__ = ["deep_merge", "merge_layers"]
