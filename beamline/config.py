# beamline/config.py
"""
Analysis configuration and defaults.
"""

from dataclasses import dataclass


@dataclass
class AnalysisConfig:
    """Global analysis configuration."""

    # Mechanism detection: max condition number of the reduced system
    cond_limit: float = 1e12

    # Samples per segment
    displacement_samples: int = 20
    force_samples: int = 48
    optimizer_samples: int = 96

    # Section catalog
    max_catalog_size: int = 10
    min_interpolated_rows: int = 2

    # Section moduli at or below this are treated as unset
    modulus_epsilon: float = 1e-12


# Global config instance
CONFIG = AnalysisConfig()
