from __future__ import annotations

import random
import threading
import unittest

from fad.age import DAY, Age, parse_age
from fad.candidates import Candidate, CandidatePool
from fad.fs.types import FileType


def _candidate(path: str, seconds: int) -> Candidate:
    return Candidate(path=path, file_type=FileType.REGULAR, age=Age(seconds=seconds))


class CandidatePoolTests(unittest.TestCase):
    def test_keeps_two_youngest(self) -> None:
        pool = CandidatePool(max_entries=2)
        self.assertTrue(pool.admit(_candidate("A", 300)))
        self.assertTrue(pool.admit(_candidate("B", 200)))
        self.assertTrue(pool.admit(_candidate("C", 100)))

        self.assertEqual(sorted(item.path for item in pool), ["B", "C"])

    def test_rejects_older_once_full(self) -> None:
        pool = CandidatePool(max_entries=2)
        pool.admit(_candidate("C", 100))
        pool.admit(_candidate("B", 200))
        self.assertFalse(pool.admit(_candidate("A", 300)))
        self.assertEqual(sorted(item.path for item in pool), ["B", "C"])

    def test_equal_age_does_not_evict(self) -> None:
        pool = CandidatePool(max_entries=1)
        pool.admit(_candidate("first", 100))
        self.assertFalse(pool.admit(_candidate("second", 100)))
        self.assertEqual([item.path for item in pool], ["first"])

    def test_unlimited_entries(self) -> None:
        pool = CandidatePool(max_entries=0)
        for index in range(50):
            self.assertTrue(pool.admit(_candidate(f"p{index}", index)))
        self.assertEqual(len(pool), 50)

    def test_max_age_rejects_older_regardless_of_fill(self) -> None:
        pool = CandidatePool(max_entries=5, max_age=parse_age("2D"))
        self.assertFalse(pool.admit(_candidate("old", 3 * DAY)))
        self.assertEqual(len(pool), 0)

        self.assertTrue(pool.admit(_candidate("young", DAY)))
        # Truncated to days, 2.4 days is still "2D".
        self.assertTrue(pool.admit(_candidate("edge", 2 * DAY + 9 * 3600)))
        self.assertFalse(pool.admit(_candidate("over", 2 * DAY + 13 * 3600)))
        self.assertEqual(sorted(item.path for item in pool), ["edge", "young"])

    def test_eviction_rescans_for_oldest(self) -> None:
        pool = CandidatePool(max_entries=3)
        for path, seconds in [("a", 50), ("b", 500), ("c", 300)]:
            pool.admit(_candidate(path, seconds))

        self.assertTrue(pool.admit(_candidate("d", 10)))  # evicts b
        self.assertTrue(pool.admit(_candidate("e", 20)))  # evicts c
        self.assertTrue(pool.admit(_candidate("f", 30)))  # evicts a
        self.assertFalse(pool.admit(_candidate("g", 40)))

        pool.sort_ascending()
        self.assertEqual([item.path for item in pool], ["d", "e", "f"])

    def test_sort_ascending_is_stable(self) -> None:
        pool = CandidatePool()
        for path, seconds in [("x", 5), ("y", 1), ("z", 5), ("w", -3)]:
            pool.admit(_candidate(path, seconds))
        pool.sort_ascending()
        self.assertEqual([item.path for item in pool], ["w", "y", "x", "z"])

    def test_max_age_width(self) -> None:
        pool = CandidatePool()
        self.assertEqual(pool.max_age_width(), 0)
        pool.admit(_candidate("a", 5))
        pool.admit(_candidate("b", 200 * 365 * DAY))
        pool.admit(_candidate("c", -1))
        self.assertEqual(pool.max_age_width(), len("200Y"))

    def test_concurrent_admission_keeps_youngest(self) -> None:
        pool = CandidatePool(max_entries=10)
        ages = list(range(1, 1001))
        random.Random(7).shuffle(ages)
        chunks = [ages[index::8] for index in range(8)]

        def worker(chunk: list[int]) -> None:
            for seconds in chunk:
                pool.admit(_candidate(f"p{seconds}", seconds))

        threads = [threading.Thread(target=worker, args=(chunk,)) for chunk in chunks]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        pool.sort_ascending()
        self.assertEqual([item.age.seconds for item in pool], list(range(1, 11)))


if __name__ == "__main__":
    unittest.main()
