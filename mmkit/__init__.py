"""Minimizer sketching, seed filtering, paired-end pairing, local alignment scoring and DUST masking for DNA sequences."""

__version__ = "0.1.0"

__all__ = [
    "hashes",
    "ketopt",
    "ksw",
    "misc",
    "options",
    "pe",
    "sdust",
    "seed",
    "sketch",
]