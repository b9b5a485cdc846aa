import unittest
import tempfile
from pathlib import Path

from dsc2asc.ingest.descriptor_parser import parse_descriptor
from dsc2asc.ingest.discovery import (
    DirectoryResolver,
    MappingResolver,
    archive_name,
    availability,
    descriptor_base_name,
    find_descriptor,
    output_name,
    sibling_name,
)
from dsc2asc.models.descriptor import ScanInterval
from dsc2asc.models.formats import FORMATS


IV = ScanInterval(start=10.0, end=20.0, step=0.02, status=1, file_extension="r01")


class TestNaming(unittest.TestCase):
    def test_base_name(self):
        self.assertEqual(descriptor_base_name("Quartz.dsc"), "Quartz")
        self.assertEqual(descriptor_base_name("/data/run.1.dsc"), "run.1")
        self.assertEqual(descriptor_base_name("noext"), "noext")
        self.assertEqual(descriptor_base_name(Path("a/b/x.DSC")), "x")

    def test_names(self):
        self.assertEqual(sibling_name("q", IV), "q.r01")
        self.assertEqual(output_name("q", IV, FORMATS["asc"]), "q_r01.asc")
        self.assertEqual(output_name("q", IV, FORMATS["csv_ru"], ordinal=2), "q_r01_2.csv")
        self.assertEqual(archive_name("q"), "q_converted.zip")

    def test_find_descriptor(self):
        self.assertEqual(find_descriptor(["a.r01", "A.DSC", "b.dsc"]), "A.DSC")
        self.assertIsNone(find_descriptor(["a.r01"]))


class TestResolvers(unittest.TestCase):
    def test_mapping_resolver_case_insensitive(self):
        r = MappingResolver({"SCAN.R01": b"\x00" * 8}, "scan")
        self.assertTrue(r.exists(IV))
        self.assertEqual(r(IV), b"\x00" * 8)
        other = ScanInterval(start=0.0, end=1.0, step=0.1, status=1, file_extension="r02")
        self.assertIsNone(r(other))

    def test_directory_resolver(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "Scan.dsc").write_text("", encoding="utf-8")
            (root / "scan.R01").write_bytes(b"\x01\x02\x03\x04")
            r = DirectoryResolver(root / "Scan.dsc")
            self.assertEqual(r.base_name, "Scan")
            self.assertEqual(r.locate(IV).name, "scan.R01")
            self.assertEqual(r(IV), b"\x01\x02\x03\x04")

    def test_availability_skips_status_zero(self):
        d = parse_descriptor(
            "[Intervals]\n1;2;0.1;0;0;0;0;0;1;r01\n2;3;0.1;0;0;0;0;0;0;r02\n3;4;0.1;0;0;0;0;0;1;r03\n"
        )
        r = MappingResolver({"s.r01": b""}, "s")
        rows = [(i, found) for i, _, found in availability(d, r)]
        self.assertEqual(rows, [(0, True), (2, False)])


if __name__ == "__main__":
    unittest.main()
