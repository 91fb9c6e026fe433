import tempfile
import unittest
from pathlib import Path

from startup_kb.config import Settings, StoreSettings
from startup_kb.errors import InvalidQuery
from startup_kb.models import KnowledgeCategory, KnowledgeEntry, Resolution, SafetyLevel
from startup_kb.service import KnowledgeService


class TestKnowledgeService(unittest.TestCase):
    def test_create_seeds_and_resolves(self) -> None:
        service = KnowledgeService.create(Settings(store=StoreSettings(path=":memory:")))
        try:
            self.assertGreater(service.count(), 0)
            resolution = service.resolve(name="Discord")
            self.assertEqual(resolution.strategy, "exact_name")
            self.assertEqual(service.find_entry(executable="spotify.exe").name, "Spotify")
            self.assertEqual(len(service.search("", limit=3)), 3)
            gaming = service.get_by_category(KnowledgeCategory.GAMING)
            self.assertEqual([entry.name for entry in gaming], ["Steam Client Bootstrapper"])
            with self.assertRaises(InvalidQuery):
                service.find_entry()
        finally:
            service.close()

    def test_create_without_seeding(self) -> None:
        settings = Settings(store=StoreSettings(path=":memory:", seed_on_start=False))
        service = KnowledgeService.create(settings)
        try:
            self.assertEqual(service.count(), 0)
            service.save_entry(KnowledgeEntry(name="Custom Tool", short_description="Local entry"))
            self.assertEqual(service.find_entry(name="custom tool").name, "Custom Tool")
        finally:
            service.close()

    def test_store_path_comes_from_settings(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "kb" / "knowledge.sqlite3"
            service = KnowledgeService.create(Settings(store=StoreSettings(path=db_path)))
            service.close()
            self.assertTrue(db_path.exists())


class TestModels(unittest.TestCase):
    def test_enum_values_are_coerced(self) -> None:
        entry = KnowledgeEntry(name="X", short_description="y", category="pup", safety_level="should_remove")
        self.assertIs(entry.category, KnowledgeCategory.PUP)
        self.assertIs(entry.safety_level, SafetyLevel.SHOULD_REMOVE)
        with self.assertRaises(ValueError):
            KnowledgeEntry(name="X", short_description="y", category="nonsense")

    def test_to_record(self) -> None:
        record = KnowledgeEntry(id=3, name="X", short_description="y").to_record()
        self.assertEqual(record["id"], 3)
        self.assertEqual(record["category"], "other")
        self.assertEqual(record["safety_level"], "safe")
        self.assertIsInstance(record["last_updated"], str)

    def test_resolution_found(self) -> None:
        self.assertFalse(Resolution().found)
        entry = KnowledgeEntry(name="X", short_description="y")
        self.assertTrue(Resolution(entry=entry, strategy="alias").found)


if __name__ == "__main__":
    unittest.main()
