"""Display pipeline for rendered images.

Rendered images are linear HDR arrays of shape (H, W, 3) with channels
normalized so that 1.0 is full white. Before an image can be shown or
written to an 8-bit file every channel goes through:

    1. Tone mapping (optional, for HDR content)
    2. Gamma correction (out = in^(1/gamma))
    3. Clamping to [0, 1]

The pipeline runs as a single Taichi kernel over the image array, one
element per thread. Taichi must be initialized before the first call;
ti.init(arch=ti.cpu) is enough.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.preview.display import process_image_for_display
    >>> image = np.full((2, 2, 3), 3.0, dtype=np.float32)
    >>> process_image_for_display(image, tone_map="reinhard", gamma=1.0)[0, 0]
    array([0.75, 0.75, 0.75], dtype=float32)
"""


from typing import Any, Literal

import numpy as np
import numpy.typing as npt
import taichi as ti

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]

_TONE_MAP_MODES: dict[str, int] = {"none": 0, "reinhard": 1, "exposure": 2}

# Lazy kernel holder - kernel is created on first use after Taichi is initialized
_display_kernel: Any = None


def _get_display_kernel() -> Any:
    """Get or create the display kernel.

    The kernel is created lazily to ensure Taichi is initialized first.
    """
    global _display_kernel
    if _display_kernel is None:

        @ti.kernel
        def _kernel(
            src: ti.types.ndarray(dtype=ti.f32, ndim=3),
            dst: ti.types.ndarray(dtype=ti.f32, ndim=3),
            mode: ti.i32,
            inv_gamma: ti.f32,
            exposure: ti.f32,
        ):
            for i, j, c in ti.ndrange(src.shape[0], src.shape[1], src.shape[2]):
                v = ti.max(src[i, j, c], 0.0)
                if mode == 1:
                    # Reinhard: c / (1 + c)
                    v = v / (1.0 + v)
                elif mode == 2:
                    # Exposure: 1 - exp(-c * exposure)
                    v = 1.0 - ti.exp(-v * exposure)
                v = ti.min(v, 1.0)
                if inv_gamma != 1.0:
                    v = v**inv_gamma
                dst[i, j, c] = ti.min(ti.max(v, 0.0), 1.0)

        _display_kernel = _kernel
    return _display_kernel


def process_image_for_display(
    image: npt.NDArray[np.floating[Any]],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Process an image for display with tone mapping and gamma correction.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        A new float32 image of the same shape, in [0, 1] range.

    Raises:
        ValueError: If the tone mapping method is unknown, gamma is not
            positive, or the image is not an (H, W, 3) array.
    """
    if tone_map not in _TONE_MAP_MODES:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")
    if gamma <= 0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    src = np.ascontiguousarray(image, dtype=np.float32)
    dst = np.empty_like(src)
    _get_display_kernel()(src, dst, _TONE_MAP_MODES[tone_map], 1.0 / gamma, exposure)
    return dst
