import unittest

from partition_memory.memory_space import Block, BlockStatus, MemorySpace


class BlockTests(unittest.TestCase):
    def test_split_with_remainder(self) -> None:
        allocated, remainder = Block(10, 30).split(12, "P")
        self.assertEqual(allocated, Block(10, 12, "P"))
        self.assertEqual(remainder, Block(22, 18))
        self.assertEqual(allocated.status, BlockStatus.ALLOCATED)
        self.assertEqual(remainder.status, BlockStatus.FREE)

    def test_split_exact(self) -> None:
        allocated, remainder = Block(0, 8).split(8, "P")
        self.assertEqual(allocated.end, 8)
        self.assertIsNone(remainder)

    def test_merge_requires_adjacency(self) -> None:
        self.assertEqual(Block(0, 5).merge(Block(5, 7)), Block(0, 12))
        with self.assertRaises(ValueError):
            Block(0, 5).merge(Block(6, 7))


class MemorySpaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.space = MemorySpace(100)

    def test_occupy_and_release_middle_block(self) -> None:
        self.space.occupy(0, 20, "A")
        self.space.occupy(1, 30, "B")
        self.space.occupy(2, 10, "C")
        merged = self.space.release(1)
        self.assertEqual(merged, Block(20, 30))
        self.assertEqual(self.space.available(), 70)
        self.assertEqual(self.space.allocated(), 30)
        self.assertEqual(len(self.space), 4)

    def test_release_last_block_merges_left(self) -> None:
        self.space.occupy(0, 60, "A")
        self.space.occupy(1, 40, "B")
        self.space.release(0)
        merged = self.space.release(1)
        self.assertEqual(merged, Block(0, 100))
        self.assertEqual(self.space.blocks(), [Block(0, 100)])

    def test_occupy_rejects_allocated_or_small_block(self) -> None:
        self.space.occupy(0, 90, "A")
        with self.assertRaises(ValueError):
            self.space.occupy(0, 5, "B")
        with self.assertRaises(ValueError):
            self.space.occupy(1, 11, "B")

    def test_index_of(self) -> None:
        self.space.occupy(0, 25, "A")
        self.assertEqual(self.space.index_of(25), 1)
        with self.assertRaises(KeyError):
            self.space.index_of(13)

    def test_fragmentation(self) -> None:
        self.assertEqual(self.space.fragmentation(), 0.0)
        self.space.occupy(0, 20, "A")
        self.space.occupy(1, 20, "B")
        self.space.release(0)
        # free: 20 at 0, 60 at 40
        self.assertAlmostEqual(self.space.fragmentation(), 0.25)
        self.assertEqual(self.space.largest_free(), 60)


if __name__ == "__main__":
    unittest.main()
