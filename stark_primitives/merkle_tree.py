"""Binary Merkle tree over sponge digests.

Nodes are stored heap-ordered: nodes[1] is the root, the children of node i
are 2i and 2i + 1, and the n leaves sit at nodes[n:2n]. nodes[0] is unused.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from stark_primitives.errors import (
    IndexOutOfBoundsError,
    InvalidLeafCountError,
    TreeNotBuiltError,
)
from stark_primitives.field import is_power_of_two
from stark_primitives.sponge import DEFAULT_SPONGE, Digest, SpongeHash

logger = logging.getLogger(__name__)


# --- Proof Types ---

@dataclass(frozen=True)
class AuthenticationPath:
    """Sibling digests from leaf level up to (excluding) the root.

    Attributes:
        leaf_index: Index of the authenticated leaf
        siblings: One digest per level, lowest level first
    """

    leaf_index: int
    siblings: Tuple[Digest, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "siblings", tuple(self.siblings))

    def __len__(self) -> int:
        return len(self.siblings)

    def __iter__(self) -> Iterator[Digest]:
        return iter(self.siblings)

    def __getitem__(self, level: int) -> Digest:
        return self.siblings[level]


@dataclass(frozen=True)
class PartialAuthenticationPath:
    """Authentication path inside a batch proof.

    A sibling is None when the verifier can recompute it from the other
    leaves and siblings of the same batch.
    """

    leaf_index: int
    siblings: Tuple[Optional[Digest], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "siblings", tuple(self.siblings))

    def __len__(self) -> int:
        return len(self.siblings)

    def __iter__(self) -> Iterator[Optional[Digest]]:
        return iter(self.siblings)

    def revealed_count(self) -> int:
        """Number of siblings actually carried by this path."""
        return sum(1 for s in self.siblings if s is not None)


# --- Tree ---

class MerkleTree:
    """Merkle tree with binary arity.

    Unbuilt until build() is called; immutable afterwards. updated() returns
    a new tree instead of modifying this one.
    """

    def __init__(self, hasher: Optional[SpongeHash] = None) -> None:
        self._hasher = hasher or DEFAULT_SPONGE
        self._nodes: Optional[List[Digest]] = None

    @classmethod
    def from_digests(
        cls, leaf_digests: Sequence[Digest], hasher: Optional[SpongeHash] = None
    ) -> "MerkleTree":
        return cls(hasher).build(leaf_digests)

    @classmethod
    def from_leaf_data(
        cls, rows: Sequence[Sequence], hasher: Optional[SpongeHash] = None
    ) -> "MerkleTree":
        """Hash each row of field elements into a leaf digest, then build."""
        tree = cls(hasher)
        return tree.build([tree._hasher.hash_varlen(row) for row in rows])

    def build(self, leaf_digests: Sequence[Digest]) -> "MerkleTree":
        """Hash all layers bottom-up.

        Raises:
            InvalidLeafCountError: If the leaf count is not a power of two >= 1
            RuntimeError: If the tree was already built
        """
        if self._nodes is not None:
            raise RuntimeError("tree is already built; use updated() for changes")

        n = len(leaf_digests)
        if not is_power_of_two(n):
            raise InvalidLeafCountError(
                f"leaf count must be a power of two >= 1, got {n}"
            )
        for i, leaf in enumerate(leaf_digests):
            if not isinstance(leaf, Digest):
                raise TypeError(f"leaf {i} is {type(leaf).__name__}, expected Digest")

        nodes: List[Digest] = [Digest.zero()] * (2 * n)
        nodes[n:] = leaf_digests
        for i in range(n - 1, 0, -1):
            nodes[i] = self._hasher.hash_pair(nodes[2 * i], nodes[2 * i + 1])

        self._nodes = nodes
        logger.debug(f"Built Merkle tree: {n} leaves, height {self.height}")
        return self

    # --- Accessors ---

    @property
    def is_built(self) -> bool:
        return self._nodes is not None

    @property
    def leaf_count(self) -> int:
        return len(self._built_nodes()) // 2

    @property
    def height(self) -> int:
        """Number of levels above the leaves (path length)."""
        return self.leaf_count.bit_length() - 1

    def root(self) -> Digest:
        return self._built_nodes()[1]

    def leaf(self, index: int) -> Digest:
        self._check_index(index)
        return self._built_nodes()[self.leaf_count + index]

    # --- Proofs ---

    def authentication_path(self, index: int) -> AuthenticationPath:
        """Siblings of the leaf and of each ancestor below the root.

        Raises:
            IndexOutOfBoundsError: If index is outside [0, leaf_count)
        """
        self._check_index(index)
        nodes = self._built_nodes()
        node = self.leaf_count + index
        siblings = []
        while node > 1:
            siblings.append(nodes[node ^ 1])
            node >>= 1
        return AuthenticationPath(index, tuple(siblings))

    def batch_authentication_paths(
        self, indices: Sequence[int]
    ) -> List[PartialAuthenticationPath]:
        """Authentication paths for several leaves with shared information pruned.

        A sibling is revealed only if it does not lie on the path of any
        requested leaf, and only in the first path that needs it. Everything
        else is left as None; verify_batch recomputes it.

        Raises:
            IndexOutOfBoundsError: If any index is outside [0, leaf_count)
        """
        for index in indices:
            self._check_index(index)
        nodes = self._built_nodes()
        n = self.leaf_count

        on_some_path = set()
        for index in indices:
            node = n + index
            while node >= 1:
                on_some_path.add(node)
                node >>= 1

        revealed = set()
        paths = []
        for index in indices:
            node = n + index
            siblings: List[Optional[Digest]] = []
            while node > 1:
                sibling = node ^ 1
                if sibling in on_some_path or sibling in revealed:
                    siblings.append(None)
                else:
                    siblings.append(nodes[sibling])
                    revealed.add(sibling)
                node >>= 1
            paths.append(PartialAuthenticationPath(index, tuple(siblings)))
        return paths

    # --- Updates ---

    def updated(self, index: int, digest: Digest) -> "MerkleTree":
        """New tree with one leaf replaced; only its path is rehashed."""
        self._check_index(index)
        nodes = list(self._built_nodes())
        node = self.leaf_count + index
        nodes[node] = digest
        node >>= 1
        while node >= 1:
            nodes[node] = self._hasher.hash_pair(nodes[2 * node], nodes[2 * node + 1])
            node >>= 1

        tree = MerkleTree(self._hasher)
        tree._nodes = nodes
        return tree

    # --- Helpers ---

    def _built_nodes(self) -> List[Digest]:
        if self._nodes is None:
            raise TreeNotBuiltError("Merkle tree queried before build()")
        return self._nodes

    def _check_index(self, index: int) -> None:
        leaf_count = self.leaf_count
        if not 0 <= index < leaf_count:
            raise IndexOutOfBoundsError(
                f"leaf index {index} out of range for {leaf_count} leaves"
            )


# --- Module-level API ---

def pad_leaf_digests(leaf_digests: Sequence[Digest]) -> List[Digest]:
    """Pad to the next power of two (at least 1) with Digest.zero()."""
    n = len(leaf_digests)
    target = 1 << max(n - 1, 0).bit_length()
    return list(leaf_digests) + [Digest.zero()] * (target - n)


def build(leaf_digests: Sequence[Digest]) -> MerkleTree:
    return MerkleTree.from_digests(leaf_digests)


def root(tree: MerkleTree) -> Digest:
    return tree.root()


def authentication_path(tree: MerkleTree, index: int) -> AuthenticationPath:
    return tree.authentication_path(index)
