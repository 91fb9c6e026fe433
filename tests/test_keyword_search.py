import unittest

from startup_kb.core.search import KeywordSearch
from startup_kb.models import KnowledgeEntry
from startup_kb.store import KnowledgeStore


class RecordingStore:
    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    def search(self, pattern, limit):
        self.calls.append((pattern, limit))
        return iter([])


class TestKeywordSearch(unittest.TestCase):
    def setUp(self) -> None:
        self.store = KnowledgeStore(":memory:")
        rows = [
            ("gamma", {"publisher": "Gamma Labs"}),
            ("Alpha", {"aliases": "first; alpha tray"}),
            ("beta", {"tags": "updater, background"}),
            ("Delta", {"short_description": "Keeps the updater running"}),
            ("Epsilon", {"publisher": "Acme"}),
            ("Zeta", {"executable_names": "updater.exe"}),
        ]
        for name, fields in rows:
            fields.setdefault("short_description", f"{name} entry")
            self.store.save_entry(KnowledgeEntry(name=name, **fields))
        self.search = KeywordSearch(self.store)

    def tearDown(self) -> None:
        self.store.close()

    def test_empty_keyword_returns_everything_ordered(self) -> None:
        names = [entry.name for entry in self.search.search("", limit=5)]
        self.assertEqual(names, ["Alpha", "beta", "Delta", "Epsilon", "gamma"])

    def test_none_keyword_behaves_like_empty(self) -> None:
        self.assertEqual(len(self.search.search(None)), 6)

    def test_matches_across_fields(self) -> None:
        names = [entry.name for entry in self.search.search("UPDATER")]
        # executable names are not part of the keyword search
        self.assertEqual(names, ["beta", "Delta"])
        self.assertEqual([e.name for e in self.search.search("acme")], ["Epsilon"])
        self.assertEqual([e.name for e in self.search.search("alpha tray")], ["Alpha"])
        self.assertEqual([e.name for e in self.search.search("gamma labs")], ["gamma"])

    def test_limit_truncates(self) -> None:
        self.assertEqual(len(self.search.search("entry", limit=2)), 2)

    def test_non_positive_limit_is_empty(self) -> None:
        self.assertEqual(self.search.search("alpha", limit=0), [])
        self.assertEqual(self.search.search("alpha", limit=-3), [])

    def test_non_positive_limit_skips_store(self) -> None:
        store = RecordingStore()
        search = KeywordSearch(store)
        self.assertEqual(search.search("x", limit=0), [])
        self.assertEqual(store.calls, [])
        self.assertEqual(search.search("x", limit=3), [])
        self.assertEqual(store.calls, [("x", 3)])

    def test_each_call_returns_a_new_list(self) -> None:
        first = self.search.search("a")
        second = self.search.search("a")
        self.assertIsNot(first, second)
        self.assertEqual([e.id for e in first], [e.id for e in second])


if __name__ == "__main__":
    unittest.main()
