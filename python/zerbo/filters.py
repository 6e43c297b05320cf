"""Low-pass FIR filter applied to raw EEG waveform samples."""

from __future__ import annotations

import numpy as np

# 51-tap symmetric low-pass kernel used by the Zeo reference tools.
FIR_KERNEL = np.array([
    0.0056, 0.0190, 0.0113, -0.0106, 0.0029, 0.0041,
    -0.0082, 0.0089, -0.0062, 0.0006, 0.0066, -0.0129,
    0.0157, -0.0127, 0.0035, 0.0102, -0.0244, 0.0336,
    -0.0323, 0.0168, 0.0136, -0.0555, 0.1020, -0.1446,
    0.1743, 0.8150, 0.1743, -0.1446, 0.1020, -0.0555,
    0.0136, 0.0168, -0.0323, 0.0336, -0.0244, 0.0102,
    0.0035, -0.0127, 0.0157, -0.0129, 0.0066, 0.0006,
    -0.0062, 0.0089, -0.0082, 0.0041, 0.0029, -0.0106,
    0.0113, 0.0190, 0.0056,
], dtype=np.float64)
FIR_KERNEL.flags.writeable = False

ROUND_DECIMALS = 6


def fir_filter(raw) -> np.ndarray:
    """Full discrete convolution of *raw* with FIR_KERNEL.

    Returns ``len(raw) + len(FIR_KERNEL) - 1`` samples, each rounded to six
    decimal places.  The result is read-only.
    """
    samples = np.asarray(raw, dtype=np.float64)
    out = np.round(np.convolve(samples, FIR_KERNEL, mode="full"), ROUND_DECIMALS)
    out.flags.writeable = False
    return out
