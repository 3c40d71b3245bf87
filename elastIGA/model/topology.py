"""
Patch ownership and named topology sets.

Multi-patch models may be distributed over several processes. Every process
owns a contiguous range of global patches, and refers to its patches through
1-based local indices. Patches owned by other processes are silently skipped
when input refers to them, which lets every process read the same input file.

Local index convention (see PatchPartition.local_index):
    < 0   the global patch number is invalid
    = 0   the patch exists but is owned by another process
    > 0   1-based local index of an owned patch
"""

from typing import Dict, List, Tuple, Optional
from dataclasses import dataclass, field


class PatchPartition:
    """
    Global-to-local patch mapping for one process.

    Attributes:
        n_patches: Total number of patches in the model
        rank: Rank of this process
        parts: List of (proc, first, last) global patch ranges, 1-based inclusive.
               Empty means that this process owns every patch.
    """

    def __init__(self, n_patches: int = 0, rank: int = 0):
        self.n_patches = n_patches
        self.rank = rank
        self.parts: List[Tuple[int, int, int]] = []

    def add_part(self, proc: int, first: int, last: int):
        """Assign the global patches first..last to process proc."""
        if first < 1 or last < first:
            raise ValueError(f"Invalid patch range [{first}, {last}] for process {proc}")
        self.parts.append((proc, first, last))
        self.n_patches = max(self.n_patches, last)

    @property
    def owned_patches(self) -> List[int]:
        """Global numbers of the patches owned by this process, in local order."""
        if not self.parts:
            return list(range(1, self.n_patches + 1))

        owned = []
        for proc, first, last in self.parts:
            if proc == self.rank:
                owned.extend(range(first, last + 1))
        return owned

    @property
    def n_local(self) -> int:
        """Number of patches owned by this process."""
        return len(self.owned_patches)

    def local_index(self, global_patch: int) -> int:
        """
        Map a global patch number to a local index.

        Returns:
            -1 for an invalid patch number, 0 if owned by another
            process, else the 1-based local index
        """
        if global_patch < 1 or global_patch > self.n_patches:
            return -1

        owned = self.owned_patches
        if global_patch not in owned:
            return 0
        return owned.index(global_patch) + 1


@dataclass
class TopologyItem:
    """One entity of a topology set: a whole patch or one of its faces/edges."""
    patch: int
    lindx: int = 0
    ldim: int = 0


@dataclass
class TopologySet:
    """Named collection of topological entities."""
    name: str
    items: List[TopologyItem] = field(default_factory=list)


# Entity type names accepted in topology set definitions, by local dimension
ENTITY_DIMENSIONS: Dict[str, int] = {
    "vertex": 0,
    "edge": 1,
    "face": 2,
    "surface": 2,
    "volume": 3,
}


def entity_dimension(entity_type: str, dimension: int) -> Optional[int]:
    """
    Local dimension of a named entity type in a model of given dimension.

    An empty type denotes whole patches. In 2D, "face" is a synonym for
    "edge" (the boundary of a surface patch), matching common usage.

    Returns:
        Local dimension, or None for an unknown type
    """
    entity_type = entity_type.lower()
    if not entity_type:
        return dimension
    if dimension == 2 and entity_type == "face":
        return 1
    return ENTITY_DIMENSIONS.get(entity_type)
