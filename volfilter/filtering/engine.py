"""Threaded selection filtering of 5D volumes.

The engine walks Time x Channel x Z. For every (t, c) it caches the Z-stack
of that channel, then filters each plane row by row on a worker pool. Each
plane is committed to the output volume once its rows have retired, even
when the pass is interrupted, so finished work is never dropped.

Example
-------
>>> import numpy as np
>>> from volfilter import Volume, run
>>> volume = Volume(np.random.rand(2, 5, 64, 64, 1), axes='TZYXC')
>>> result = run(volume, [1], 'local_max')
>>> result.interrupted
False
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import numpy as np

from ..core.data_type import DataType
from ..core.utils import normalize_radius
from ..core.volume import Volume
from .neighborhood import Bounds, NeighborhoodExtractor, SliceCache
from .pixel_access import double_array_to_safe_array
from .scheduler import CancellationToken, PlaneScheduler
from .strategies import FilterStrategy, get_strategy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class FilterResult:
    """Output of a filter pass.

    Attributes
    ----------
    volume : Volume
        Filtered volume, same shape and element kind as the input. When
        ``interrupted`` is True, only the first ``planes_completed`` planes
        (in T, C, Z order) are complete; the interrupted plane holds the rows
        that finished and zeros elsewhere, later planes are all zeros.
    interrupted : bool
        True if the pass was cancelled or a row task failed.
    planes_completed : int
        Number of fully filtered planes.
    planes_total : int
        Number of planes in the volume (T * C * Z).
    elapsed_s : float
        Wall-clock duration of the pass.
    """

    volume: Volume
    interrupted: bool
    planes_completed: int
    planes_total: int
    elapsed_s: float = 0.0


class SelectionFilterEngine:
    """Applies a :class:`FilterStrategy` over the neighborhood of every pixel.

    Args:
        strategy: Strategy instance or registered strategy name.
        executor: Worker pool for row tasks. Defaults to the process-wide pool.
        token: Cancellation token. Once cancelled (by the caller or by a failing
            row task) it stays set until the caller clears it.
        progress_callback: Called as ``callback(planes_done, planes_total)`` on
            the calling thread after each completed plane.
    """

    def __init__(
        self,
        strategy: Union[FilterStrategy, str],
        executor: Optional[Executor] = None,
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.strategy = get_strategy(strategy) if isinstance(strategy, str) else strategy
        self.executor = executor
        self.token = token or CancellationToken()
        self.progress_callback = progress_callback

    def cancel(self) -> None:
        """Request cooperative interruption of the running pass."""
        self.token.cancel()

    def run(self, volume: Volume, radius: Sequence[int]) -> FilterResult:
        """Filter ``volume`` with the given neighborhood radius.

        Args:
            volume: Input volume, never modified.
            radius: 1 to 3 half-window sizes in (X, Y, Z) order.

        Returns:
            FilterResult holding the new volume and the interruption outcome.

        Raises:
            ValueError: If ``radius`` is empty or invalid.
            TypeError: If the element kind of ``volume`` is not supported.
        """
        kernel = normalize_radius(radius)
        data_type = volume.data_type

        shape = volume.shape
        planes_total = shape.size_t * shape.size_c * shape.size_z
        logger.info(
            f"Applying '{self.strategy.name}' filter with radius {kernel} to {volume!r}"
        )
        start = time.perf_counter()

        scheduler = PlaneScheduler(self.executor, self.token)
        out = volume.create_output(self.strategy.name)
        planes_done = 0

        for t in range(shape.size_t):
            # storage for every z first, so partial passes never write to missing images
            for z in range(shape.size_z):
                out.set_image(t, z, np.zeros(shape.image_shape, dtype=data_type.dtype))

            for c in range(shape.size_c):
                slices = SliceCache(volume, t, c)
                extractor = NeighborhoodExtractor(slices, kernel)
                scratch = np.zeros(shape.plane_size, dtype=np.float64)

                for z in range(shape.size_z):
                    out_plane = np.array(out.get_plane(t, z, c))
                    row_task = self._row_task(
                        extractor, z, extractor.z_bounds(z), scratch, out_plane, data_type, volume.is_signed
                    )
                    outcome = scheduler.run_plane(row_task, shape.size_y)
                    out.set_plane(t, z, c, out_plane)

                    if outcome.interrupted:
                        elapsed = time.perf_counter() - start
                        logger.warning(
                            f"Filter interrupted at t={t}, c={c}, z={z}: "
                            f"{outcome.rows_completed}/{outcome.rows_total} rows of the plane done, "
                            f"{planes_done}/{planes_total} planes complete"
                        )
                        return FilterResult(out, True, planes_done, planes_total, elapsed)

                    planes_done += 1
                    logger.debug(f"Plane t={t}, c={c}, z={z} done ({planes_done}/{planes_total})")
                    if self.progress_callback is not None:
                        self.progress_callback(planes_done, planes_total)

        elapsed = time.perf_counter() - start
        logger.info(f"Filtered {planes_total} planes in {elapsed:.2f}s")
        return FilterResult(out, False, planes_done, planes_total, elapsed)

    def _row_task(
        self,
        extractor: NeighborhoodExtractor,
        z: int,
        z_bounds: Bounds,
        scratch: np.ndarray,
        out_plane: np.ndarray,
        data_type: DataType,
        signed: bool,
    ) -> Callable[[int], bool]:
        slices = extractor.cache
        width = slices.width
        strategy = self.strategy
        token = self.token

        def process_row(y: int) -> bool:
            if token.is_cancelled():
                return False

            y_bounds = extractor.y_bounds(y)
            neighborhood = np.empty(extractor.line_capacity(y_bounds, z_bounds), dtype=np.float64)
            offset = y * width

            for x in range(width):
                count = extractor.gather(x, y_bounds, z_bounds, neighborhood)
                scratch[offset + x] = strategy.score(slices.center_value(x, y, z), neighborhood, count)

            double_array_to_safe_array(scratch, offset, out_plane, offset, width, data_type, signed)
            return True

        return process_row


def run(
    volume: Volume,
    radius: Sequence[int],
    strategy: Union[FilterStrategy, str],
    executor: Optional[Executor] = None,
    token: Optional[CancellationToken] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> FilterResult:
    """Filter ``volume`` with ``strategy`` over a neighborhood of ``radius``.

    See :class:`SelectionFilterEngine` for the arguments.
    """
    engine = SelectionFilterEngine(
        strategy, executor=executor, token=token, progress_callback=progress_callback
    )
    return engine.run(volume, radius)
