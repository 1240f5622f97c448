import numpy as np
# =====================================
# Utils
# =====================================
def next_pow2(x):
    x = max(int(x), 1) - 1
    x |= (x >> 1)
    x |= (x >> 2)
    x |= (x >> 4)
    x |= (x >> 8)
    x |= (x >> 16)
    return x + 1


def pad3(arr):
    """Pad an (n, d) array with d <= 3 to (n, 3) with zero components."""
    out = np.zeros((arr.shape[0], 3), dtype=np.float64)
    out[:, :arr.shape[1]] = arr
    return out
