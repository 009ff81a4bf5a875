"""Retained snapshots, in step order. Append-only; frames are never modified once added."""

from typing import Iterator, NamedTuple

from tissue.state import Snapshot


class Frame(NamedTuple):
    step: int
    snapshot: Snapshot


class Trajectory:
    __slots__ = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[Frame] = []

    def append(self, step: int, snapshot: Snapshot) -> None:
        if self._frames and step <= self._frames[-1].step:
            raise ValueError(f"step {step} is not after last retained step {self._frames[-1].step}")
        self._frames.append(Frame(step, snapshot))

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, k):
        if isinstance(k, slice):
            return tuple(self._frames[k])
        return self._frames[k]

    def __iter__(self) -> Iterator[Frame]:
        return iter(tuple(self._frames))

    @property
    def steps(self) -> list[int]:
        return [f.step for f in self._frames]
