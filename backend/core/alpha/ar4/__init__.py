"""AR(4) alpha package.

Importing this package registers AR4Alpha under the name 'ar4'.
"""

from core.alpha.ar4.generator import AR4Alpha, ar4_step
from core.alpha.ar4.models import AR4_ALPHA_NAME, AR4Coefficients, AR4Config, AR4State
from core.alpha.ar4.regression import fit_ar4, invert_matrix, predict_ar4

__all__ = [
    "AR4Alpha",
    "ar4_step",
    "AR4_ALPHA_NAME",
    "AR4Coefficients",
    "AR4Config",
    "AR4State",
    "fit_ar4",
    "invert_matrix",
    "predict_ar4",
]
