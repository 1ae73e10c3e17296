"""
FilterChain - Serial cascade of processing blocks

Signal flows through stages in the order they were added; each stage
owns its own history. Buffers are run stage by stage, which gives the
same result as threading every sample through the whole chain.
"""

import logging
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np

from .base import ProcessingBlock, Samples

logger = logging.getLogger(__name__)


class FilterChain(ProcessingBlock):
    """
    Ordered sequence of filters, each fed the previous stage's output.
    """

    def __init__(self, stages: Optional[Iterable[ProcessingBlock]] = None):
        super().__init__()
        self._stages = []
        for stage in stages or ():
            self.add_stage(stage)

    def add_stage(self, stage: ProcessingBlock) -> "FilterChain":
        """
        Append a stage to the end of the chain.

        Args:
            stage: Filter (or nested chain) to append

        Returns:
            self, so calls can be chained

        Raises:
            TypeError: If stage is not a ProcessingBlock
            ValueError: If the stage is already in this chain (at any
                nesting depth), or is or contains this chain
        """
        if not isinstance(stage, ProcessingBlock):
            raise TypeError(f"Stage must be a ProcessingBlock, got {type(stage).__name__}")

        incoming = [stage]
        if isinstance(stage, FilterChain):
            incoming.extend(stage._blocks())

        if any(block is self for block in incoming):
            raise ValueError(f"Cannot add {stage!r} to itself")

        # A shared instance would mix two streams through one history
        present = list(self._blocks())
        if any(block is other for block in incoming for other in present):
            raise ValueError(f"Stage {stage!r} already in chain")

        self._stages.append(stage)
        logger.debug("%s: added stage %d: %r", self.name, len(self._stages) - 1, stage)
        return self

    def _blocks(self) -> Iterator[ProcessingBlock]:
        """Every block below this chain, nested chains included"""
        for stage in self._stages:
            yield stage
            if isinstance(stage, FilterChain):
                yield from stage._blocks()

    @property
    def stages(self) -> Tuple[ProcessingBlock, ...]:
        return tuple(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[ProcessingBlock]:
        return iter(self._stages)

    def __getitem__(self, index: int) -> ProcessingBlock:
        return self._stages[index]

    def process(self, x: float) -> float:
        """Thread one sample through every stage"""
        for stage in self._stages:
            x = stage.process(x)
        return x

    def process_buffer(self, samples: Samples,
                       out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Run the whole buffer through each stage in turn.

        Intermediate results are written into out, so only one output
        buffer is allocated (none if out is given).
        """
        values, out = self._prepare_buffers(samples, out)
        out[:] = values
        for stage in self._stages:
            stage.process_buffer(out, out=out)
        return out

    def reset(self) -> None:
        for stage in self._stages:
            stage.reset()

    def get_state(self) -> dict:
        state = super().get_state()
        state["stages"] = [stage.get_state() for stage in self._stages]
        return state

    def __repr__(self) -> str:
        return f"{self.name}({len(self._stages)} stages)"
