import numpy as np

BUCKETS = 64
BUCKET_WIDTH = 4


class LumaCalibration:
    """Adaptive brightness ceiling shared by the exposure-normalising shaders.

    Each rendered cell adds its luma to a 64-bucket histogram. When a pass
    completes, the ceiling moves halfway towards the most populated bucket and
    the histogram is emptied. A pass that never completes leaves its counts in
    place for the next one unless `keep_cancelled_samples` is False.
    """

    def __init__(self, keep_cancelled_samples: bool = True):
        self.keep_cancelled_samples = keep_cancelled_samples
        self.histogram = np.zeros(BUCKETS, dtype=np.int64)
        self.max_luma = 255
        self._in_pass = False

    def begin(self) -> None:
        if self._in_pass and not self.keep_cancelled_samples:
            self.histogram[:] = 0
        self._in_pass = True

    def record(self, luma: int) -> None:
        self.histogram[min(max(luma // BUCKET_WIDTH, 0), BUCKETS - 1)] += 1

    def norm(self, luma: float) -> float:
        return min(max(luma / self.max_luma, 0.0), 1.0)

    def settle(self) -> None:
        # argmax returns the first maximum, so ties go to the darkest bucket
        mode = int(np.argmax(self.histogram))
        self.max_luma = min(max((mode * BUCKET_WIDTH + self.max_luma) // 2, 1), 255)
        self.histogram[:] = 0
        self._in_pass = False
