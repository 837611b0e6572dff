"""Coefficient tableaus for the manifold Euler and Crouch--Grossmann steps.

Coefficients are kept as exact rationals. On a flat space each tableau
describes the classical explicit Runge--Kutta method it generalises.

References
----------
Owren, B. and Marthinsen, A. "Runge-Kutta Methods Adapted to Manifolds and
Based on Rigid Frames." *BIT Numerical Mathematics* 39.1 (1999): 116-142.
doi:10.1023/A:1022325426017.
"""

from manifoldode.integrators.algorithms.base_algorithm_step import (
    ManifoldTableau,
)

#: Forward Euler generalised with a single retraction.
MANIFOLD_EULER_TABLEAU = ManifoldTableau(
    a=((0,),),
    b=(1,),
    c=(0,),
    order=1,
)

#: Second-order Crouch--Grossmann method (Owren and Marthinsen, 1999).
#: Reduces to the explicit midpoint rule on a vector space.
CG2_TABLEAU = ManifoldTableau(
    a=((0, 0), ("1/2", 0)),
    b=(0, 1),
    c=(0, "1/2"),
    order=2,
)

#: Third-order Crouch--Grossmann method, tableau 6.1 of Owren and
#: Marthinsen (1999).
CG3_TABLEAU = ManifoldTableau(
    a=(
        (0, 0, 0),
        ("3/4", 0, 0),
        ("119/216", "17/108", 0),
    ),
    b=("13/51", "-2/3", "24/17"),
    c=(0, "3/4", "17/24"),
    order=3,
)
