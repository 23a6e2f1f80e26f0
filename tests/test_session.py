"""
Unit tests for the session schema.

Run with: python -m unittest tests.test_session
"""

import unittest
from dataclasses import dataclass

from vxcore.session import JsonRecordCodec, VxCoreSessionConfig


@dataclass
class _Record:
    id: str
    root: str


class _RecordCodec:
    def decode(self, value):
        if not isinstance(value, dict):
            return _Record(id="", root="")
        return _Record(id=str(value.get("id", "")), root=str(value.get("rootFolder", "")))

    def encode(self, record):
        return {"id": record.id, "rootFolder": record.root}


class TestVxCoreSessionConfig(unittest.TestCase):
    def test_missing_or_malformed_notebooks(self):
        self.assertEqual(VxCoreSessionConfig.from_dict({}).notebooks, [])
        self.assertEqual(VxCoreSessionConfig.from_dict({"notebooks": "nb"}).notebooks, [])
        self.assertEqual(VxCoreSessionConfig.from_dict({"notebooks": {"a": 1}}).notebooks, [])
        self.assertEqual(VxCoreSessionConfig.from_dict(None).notebooks, [])

    def test_default_codec_keeps_raw_values_in_order(self):
        doc = {"notebooks": [{"id": "b"}, {"id": "a"}, "opaque", 3]}
        session = VxCoreSessionConfig.from_dict(doc)
        self.assertEqual(session.notebooks, [{"id": "b"}, {"id": "a"}, "opaque", 3])
        self.assertEqual(session.to_dict(), doc)

    def test_decode_copies_input(self):
        doc = {"notebooks": [{"id": "a"}]}
        session = VxCoreSessionConfig.from_dict(doc)
        session.notebooks[0]["id"] = "changed"
        self.assertEqual(doc["notebooks"][0]["id"], "a")

    def test_injected_codec(self):
        codec = _RecordCodec()
        doc = {
            "notebooks": [
                {"id": "n1", "rootFolder": "/notes/one", "type": "bundled"},
                {"id": "n2", "rootFolder": "/notes/two"},
                {"id": "n3", "rootFolder": "/notes/three"},
            ]
        }
        session = VxCoreSessionConfig.from_dict(doc, codec)
        self.assertEqual([r.id for r in session.notebooks], ["n1", "n2", "n3"])

        out = session.to_dict(codec)
        self.assertEqual(len(out["notebooks"]), 3)
        self.assertEqual([r["id"] for r in out["notebooks"]], ["n1", "n2", "n3"])
        self.assertNotIn("type", out["notebooks"][0])

    def test_empty_session_encodes_empty_list(self):
        self.assertEqual(VxCoreSessionConfig().to_dict(JsonRecordCodec()), {"notebooks": []})


if __name__ == "__main__":
    unittest.main()
