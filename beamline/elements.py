# Beam element stiffness + Hermite shape functions

import numpy as np
from typing import Tuple


def beam_element_stiffness(E: float, I: float, L: float) -> np.ndarray:
    """
    Euler-Bernoulli bending stiffness matrix.
    DOF order: [w_i, θ_i, w_j, θ_j]
    """
    EI = E * I
    L2 = L * L
    L3 = L2 * L

    k = np.array([
        [ 12*EI/L3,   6*EI/L2, -12*EI/L3,   6*EI/L2],
        [  6*EI/L2,    4*EI/L,  -6*EI/L2,    2*EI/L],
        [-12*EI/L3,  -6*EI/L2,  12*EI/L3,  -6*EI/L2],
        [  6*EI/L2,    2*EI/L,  -6*EI/L2,    4*EI/L],
    ], dtype=float)
    return k


def hermite_shape_functions(xi: float) -> Tuple[float, float, float, float]:
    """
    Hermite cubic shape functions at normalised position xi = x / L.

    w(xi) = N1*w_i + N2*θ_i*L + N3*w_j + N4*θ_j*L
    """
    N1 = 1 - 3*xi**2 + 2*xi**3
    N2 = xi - 2*xi**2 + xi**3
    N3 = 3*xi**2 - 2*xi**3
    N4 = -xi**2 + xi**3

    return N1, N2, N3, N4


def hermite_row(x: float, L: float) -> np.ndarray:
    """Shape function row [N1, N2*L, N3, N4*L] at local position x."""
    N1, N2, N3, N4 = hermite_shape_functions(x / L)
    return np.array([N1, N2 * L, N3, N4 * L], dtype=float)
