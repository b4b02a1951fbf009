"""
Device selection for torch computation.
"""

from typing import Optional, Union
import torch
import warnings


def get_default_device() -> torch.device:
    """Default compute device.

    The engine is single-threaded and CPU-bound by default; accelerators are
    only used when asked for explicitly.
    """
    return torch.device('cpu')


def parse_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Parse device specification.

    Args:
        device: Device specification
            - None: Use default (CPU)
            - 'auto': Use best available
            - 'cpu': Use CPU
            - 'cuda' / 'cuda:X': Use a CUDA device
            - torch.device: Use as-is

    Returns:
        Parsed device
    """
    if device is None:
        return get_default_device()

    if isinstance(device, torch.device):
        return device

    if isinstance(device, str):
        if device == 'auto':
            if torch.cuda.is_available():
                return torch.device('cuda')
            return torch.device('cpu')
        elif device == 'cpu':
            return torch.device('cpu')
        elif device.startswith('cuda'):
            if not torch.cuda.is_available():
                warnings.warn("CUDA not available, falling back to CPU")
                return torch.device('cpu')
            return torch.device(device)
        else:
            raise ValueError(f"Unknown device: {device}")
    else:
        raise TypeError(f"Device must be str or torch.device, got {type(device)}")
