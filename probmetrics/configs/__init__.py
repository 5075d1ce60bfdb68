from .fingerprint import compute_fingerprint
from .loader import ResolvedConfig, load_config

__all__ = ["ResolvedConfig", "load_config", "compute_fingerprint"]
