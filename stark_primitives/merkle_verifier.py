"""Merkle authentication path verification.

Verification never raises: any malformed input (wrong types, out-of-range
index, inconsistent batch) is reported as False.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Union

from stark_primitives.sponge import DEFAULT_SPONGE, Digest, SpongeHash

if TYPE_CHECKING:
    from stark_primitives.merkle_tree import AuthenticationPath, PartialAuthenticationPath

logger = logging.getLogger(__name__)


# --- Verifier Class ---

class MerkleVerifier:
    """Verifies paths against one fixed root.

    Usage:
        verifier = MerkleVerifier(tree.root())
        for index, leaf in queries:
            if not verifier.verify(leaf, index, paths[index]):
                return False
    """

    def __init__(self, root: Digest, hasher: Optional[SpongeHash] = None) -> None:
        self.root = root
        self._hasher = hasher or DEFAULT_SPONGE

    def verify(
        self,
        leaf: Digest,
        index: int,
        path: Union["AuthenticationPath", Sequence[Digest]],
    ) -> bool:
        """Recompute the root from leaf and siblings and compare.

        Returns False when index has bits above the path length, is negative,
        or when any input is not a Digest.
        """
        siblings = _siblings_of(path)
        if siblings is None:
            return False
        if not isinstance(index, int) or isinstance(index, bool):
            return False
        if index < 0 or index >> len(siblings) != 0:
            logger.debug(f"Index {index} does not fit a path of length {len(siblings)}")
            return False
        if not isinstance(leaf, Digest) or not isinstance(self.root, Digest):
            return False
        if not all(isinstance(s, Digest) for s in siblings):
            return False

        acc = leaf
        position = index
        for sibling in siblings:
            if position & 1 == 0:
                acc = self._hasher.hash_pair(acc, sibling)
            else:
                acc = self._hasher.hash_pair(sibling, acc)
            position >>= 1

        if acc != self.root:
            logger.debug(f"Path for leaf {index} does not reach the root")
            return False
        return True

    def verify_batch(
        self,
        indices: Sequence[int],
        leaves: Sequence[Digest],
        paths: Sequence["PartialAuthenticationPath"],
    ) -> bool:
        """Verify a batch proof produced by MerkleTree.batch_authentication_paths().

        Rebuilds every node computable from the leaves and revealed siblings,
        level by level, fills in the pruned siblings, then checks each
        completed path on its own.
        """
        if not len(indices) == len(leaves) == len(paths):
            logger.debug("Batch proof has mismatched lengths")
            return False
        if not indices:
            return True

        sibling_lists = [_siblings_of(p) for p in paths]
        if any(s is None for s in sibling_lists):
            return False
        height = len(sibling_lists[0])
        if any(len(s) != height for s in sibling_lists):
            logger.debug("Batch proof paths have different lengths")
            return False

        n = 1 << height
        for index, leaf in zip(indices, leaves):
            if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < n:
                return False
            if not isinstance(leaf, Digest):
                return False

        known: Dict[int, Digest] = {}
        for index, leaf, siblings in zip(indices, leaves, sibling_lists):
            node = n + index
            if known.get(node, leaf) != leaf:
                logger.debug(f"Batch proof claims two digests for leaf {index}")
                return False
            known[node] = leaf
            for sibling in siblings:
                if sibling is not None:
                    if not isinstance(sibling, Digest):
                        return False
                    known.setdefault(node ^ 1, sibling)
                node >>= 1

        # Level-by-level closure: parent of two known siblings becomes known
        level_start = n
        while level_start > 1:
            level_nodes = sorted(k for k in known if level_start <= k < 2 * level_start)
            for node in level_nodes:
                parent = node >> 1
                if parent in known or (node ^ 1) not in known:
                    continue
                left, right = (node, node ^ 1) if node & 1 == 0 else (node ^ 1, node)
                known[parent] = self._hasher.hash_pair(known[left], known[right])
            level_start >>= 1

        for index, leaf, siblings in zip(indices, leaves, sibling_lists):
            node = n + index
            completed: List[Digest] = []
            for sibling in siblings:
                if sibling is None:
                    sibling = known.get(node ^ 1)
                    if sibling is None:
                        logger.debug(f"Pruned sibling of node {node} cannot be recomputed")
                        return False
                completed.append(sibling)
                node >>= 1
            if not self.verify(leaf, index, completed):
                return False
        return True


# --- Helpers ---

def _siblings_of(path) -> Optional[tuple]:
    """Sibling tuple from a path object or a plain sequence; None if neither."""
    siblings = getattr(path, "siblings", path)
    if isinstance(siblings, (str, bytes)) or not isinstance(siblings, Sequence):
        return None
    return tuple(siblings)


# --- Module-level API ---

def verify(
    root: Digest,
    leaf: Digest,
    index: int,
    path: Union["AuthenticationPath", Sequence[Digest]],
    hasher: Optional[SpongeHash] = None,
) -> bool:
    return MerkleVerifier(root, hasher).verify(leaf, index, path)


def verify_batch(
    root: Digest,
    indices: Sequence[int],
    leaves: Sequence[Digest],
    paths: Sequence["PartialAuthenticationPath"],
    hasher: Optional[SpongeHash] = None,
) -> bool:
    return MerkleVerifier(root, hasher).verify_batch(indices, leaves, paths)
