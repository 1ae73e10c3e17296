"""
ProcessingBlock - Foundation for all sample processors

Key principles:
1. Configuration is validated before a block exists; processing never raises
2. process() handles one sample in O(1)
3. process_buffer() is exactly process() applied in order
4. State persists between calls until reset()
5. One instance per sample stream (no internal locking)
"""

from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np

Samples = Union[Sequence[float], np.ndarray]


class ProcessingBlock:
    """
    Base class for filters and filter chains.

    Subclasses implement process() and reset(); process_buffer() is
    provided in terms of process() and may be overridden with a faster
    loop that performs the same arithmetic.
    """

    def __init__(self):
        self.name = self.__class__.__name__

    def process(self, x: float) -> float:
        """
        Process one sample.

        Args:
            x: Input sample

        Returns:
            Output sample
        """
        raise NotImplementedError

    def reset(self) -> None:
        """Zero all history, keep configuration"""
        raise NotImplementedError

    def process_buffer(self, samples: Samples,
                       out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Process a buffer of samples, carrying state across calls.

        Args:
            samples: Input samples (any 1-D sequence of numbers)
            out: Optional preallocated float64 output buffer of the same
                length; may be the input array itself

        Returns:
            Output buffer (out, if given)
        """
        values, out = self._prepare_buffers(samples, out)
        process = self.process
        for i, x in enumerate(values):
            out[i] = process(x)
        return out

    @staticmethod
    def _prepare_buffers(samples: Samples,
                         out: Optional[np.ndarray]) -> Tuple[list, np.ndarray]:
        """
        Convert input to a list of Python floats and check the output buffer.

        Raises:
            ValueError: If samples are not 1-D or out has the wrong
                shape or dtype
        """
        x = np.asarray(samples, dtype=np.float64)
        if x.ndim != 1:
            raise ValueError(f"Expected a 1-D buffer, got shape {x.shape}")

        if out is None:
            out = np.empty_like(x)
        elif out.shape != x.shape:
            raise ValueError(
                f"Output buffer shape {out.shape} does not match input {x.shape}"
            )
        elif out.dtype != np.float64:
            raise ValueError(f"Output buffer must be float64, got {out.dtype}")

        # tolist() copies, so out may alias samples
        return x.tolist(), out

    def get_state(self) -> Dict[str, Any]:
        """
        Get current block state for debugging.

        Returns:
            Dictionary of state variables
        """
        return {'name': self.name}

    def __repr__(self) -> str:
        return f"{self.name}()"
