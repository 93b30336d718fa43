import math
from math import comb

def binom_cdf(k: int, n: int, p: float) -> float:
    # inclusive CDF: P(X <= k)
    if n <= 0:
        return 1.0
    if k < 0:
        return 0.0
    s = 0.0
    for i in range(0, min(k, n)+1):
        s += comb(n, i) * (p**i) * ((1-p)**(n-i))
    return min(max(s, 0.0), 1.0)

def binom_two_sided(k: int, n: int, p: float = 0.5) -> float:
    """Two-sided p-value of seeing max-count k out of n under rate p."""
    if n == 0:
        return 1.0
    pv = 2 * min(binom_cdf(k, n, p), 1 - binom_cdf(k-1, n, p))
    return max(min(pv, 1.0), 0.0)

def entropy(counts) -> float:
    total = sum(counts)
    H = 0.0
    for c in counts:
        if c == 0:
            continue
        p = c / total
        H -= p * math.log(p, 2)
    return H

def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)

def pct(part: float, whole: float) -> int:
    return round_half_up(part / whole * 100) if whole else 0
