"""
Unit tests for the config schema and layer merge.

Run with: python -m unittest tests.test_config
"""

import unittest

from vxcore.config import SearchConfig, VxCoreConfig, merge_patch


class TestVxCoreConfigDecode(unittest.TestCase):
    def test_defaults(self):
        cfg = VxCoreConfig()
        self.assertEqual(cfg.version, "0.1.0")
        self.assertEqual(cfg.search.backends, ["rg", "simple"])

    def test_unknown_field_is_dropped(self):
        cfg = VxCoreConfig.from_dict({"version": "2.0", "unknown_field": 123})
        self.assertEqual(cfg.version, "2.0")
        self.assertEqual(cfg.search.backends, ["rg", "simple"])
        self.assertNotIn("unknown_field", cfg.to_dict())

    def test_type_mismatch_keeps_field_default(self):
        cfg = VxCoreConfig.from_dict({"version": 5, "search": {"backends": ["rg"]}})
        self.assertEqual(cfg.version, "0.1.0")
        self.assertEqual(cfg.search.backends, ["rg"])

        cfg = VxCoreConfig.from_dict({"version": "3.1", "search": "rg"})
        self.assertEqual(cfg.version, "3.1")
        self.assertEqual(cfg.search.backends, ["rg", "simple"])

        cfg = VxCoreConfig.from_dict({"search": {"backends": "rg"}})
        self.assertEqual(cfg.search.backends, ["rg", "simple"])

    def test_non_string_backends_are_skipped(self):
        cfg = VxCoreConfig.from_dict({"search": {"backends": ["simple", 1, None, "rg"]}})
        self.assertEqual(cfg.search.backends, ["simple", "rg"])

    def test_empty_backends_list_is_kept(self):
        cfg = VxCoreConfig.from_dict({"search": {"backends": []}})
        self.assertEqual(cfg.search.backends, [])

    def test_non_object_document(self):
        self.assertEqual(VxCoreConfig.from_dict([1, 2]), VxCoreConfig())
        self.assertEqual(VxCoreConfig.from_dict(None), VxCoreConfig())

    def test_encode_only_known_keys(self):
        cfg = VxCoreConfig.from_dict(
            {"version": "1.2", "search": {"backends": ["rg"], "extra": True}, "theme": "dark"}
        )
        self.assertEqual(cfg.to_dict(), {"version": "1.2", "search": {"backends": ["rg"]}})

    def test_default_instances_do_not_share_lists(self):
        a = SearchConfig()
        b = SearchConfig()
        a.backends.append("x")
        self.assertEqual(b.backends, ["rg", "simple"])


class TestMergePatch(unittest.TestCase):
    def setUp(self):
        self.default = {"version": "0.1.0", "search": {"backends": ["rg", "simple"], "limit": 10}}

    def test_user_list_replaces_default_list(self):
        merged = merge_patch(self.default, {"search": {"backends": ["simple"]}})
        self.assertEqual(merged["search"]["backends"], ["simple"])
        self.assertEqual(merged["search"]["limit"], 10)
        self.assertEqual(merged["version"], "0.1.0")

    def test_user_omits_field(self):
        merged = merge_patch(self.default, {"version": "9.9"})
        self.assertEqual(merged["version"], "9.9")
        self.assertEqual(merged["search"]["backends"], ["rg", "simple"])

    def test_scalar_replaces_object(self):
        merged = merge_patch(self.default, {"search": "none"})
        self.assertEqual(merged["search"], "none")

    def test_object_replaces_scalar(self):
        merged = merge_patch({"search": "none"}, {"search": {"backends": ["rg"]}})
        self.assertEqual(merged["search"], {"backends": ["rg"]})

    def test_null_removes_key(self):
        merged = merge_patch(self.default, {"version": None})
        self.assertNotIn("version", merged)

    def test_inputs_are_not_mutated(self):
        user = {"search": {"backends": ["simple"]}}
        merged = merge_patch(self.default, user)
        merged["search"]["backends"].append("rg")
        self.assertEqual(self.default["search"]["backends"], ["rg", "simple"])
        self.assertEqual(user["search"]["backends"], ["simple"])


if __name__ == "__main__":
    unittest.main()
