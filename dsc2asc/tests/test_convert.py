import unittest
import tempfile
from pathlib import Path

import numpy as np

from dsc2asc.analysis.convert import convert_descriptor, output_names, read_interval
from dsc2asc.ingest.descriptor_parser import InvalidDescriptorError, parse_descriptor
from dsc2asc.ingest.discovery import DirectoryResolver, MappingResolver
from dsc2asc.models.descriptor import ScanDescriptor
from dsc2asc.models.formats import FORMATS


DSC = "\n".join(
    [
        "[General]",
        "method=1",
        "[Intervals]",
        "10.0;12.0;0.02;0;0;0;0;0;1;r01",
        "20.0;30.0;0.05;0;0;0;0;0;0;r02",
        "30.0;40.0;0.02;0;0;0;0;0;1;r03",
    ]
)


def _f32(values) -> bytes:
    return np.asarray(values, dtype="<f4").tobytes()


class TestConvertDescriptor(unittest.TestCase):
    def setUp(self):
        self.descriptor = parse_descriptor(DSC)

    def test_status_zero_and_missing_file(self):
        files = {"scan.r01": _f32([123.4, 125.0])}
        res = convert_descriptor(self.descriptor, MappingResolver(files, "scan"), FORMATS["csv_ru"], base_name="scan")
        self.assertEqual(res.n_eligible, 2)
        self.assertEqual(res.n_convertible, 1)
        self.assertEqual(res.n_converted, 1)
        doc = res.single
        self.assertIsNotNone(doc)
        self.assertEqual(doc.name, "scan_r01.csv")
        self.assertEqual(doc.interval_index, 0)
        self.assertEqual(doc.mime_type, "text/csv")
        self.assertEqual(doc.text, "10,0000;123,4\n10,0200;125,0\n")
        self.assertEqual(res.failures, ())

    def test_descriptor_order_preserved(self):
        files = {"scan.r03": _f32([1.0]), "scan.r01": _f32([2.0])}
        res = convert_descriptor(self.descriptor, MappingResolver(files, "scan"), FORMATS["asc"], base_name="scan")
        self.assertEqual([d.name for d in res.documents], ["scan_r01.asc", "scan_r03.asc"])
        self.assertIsNone(res.single)
        self.assertEqual(res.documents[1].text, "30.0000 1.0\n")

    def test_resolver_failure_does_not_abort_batch(self):
        def resolver(interval):
            if interval.file_extension == "r01":
                raise OSError("disk unreadable")
            return _f32([5.0, 6.0])

        res = convert_descriptor(self.descriptor, resolver, FORMATS["asc"], base_name="scan")
        self.assertEqual(res.n_converted, 1)
        self.assertEqual(res.documents[0].name, "scan_r03.asc")
        self.assertEqual(len(res.failures), 1)
        self.assertEqual(res.failures[0].interval_index, 0)
        self.assertIn("OSError", res.failures[0].message)
        self.assertEqual(res.n_convertible, 2)

    def test_trailing_bytes_reported(self):
        files = {"scan.r01": _f32([1.0, 2.0]) + b"\x00\x01"}
        res = convert_descriptor(self.descriptor, MappingResolver(files, "scan"), FORMATS["asc"], base_name="scan")
        self.assertEqual(res.documents[0].text.count("\n"), 2)
        self.assertTrue(any("2 trailing byte" in w for w in res.warnings))

    def test_invalid_descriptor_raises(self):
        with self.assertRaises(InvalidDescriptorError):
            convert_descriptor(ScanDescriptor(), lambda iv: None, FORMATS["asc"], base_name="scan")

    def test_nothing_found_is_not_an_error(self):
        res = convert_descriptor(self.descriptor, lambda iv: None, FORMATS["asc"], base_name="scan")
        self.assertEqual(res.n_eligible, 2)
        self.assertEqual(res.n_convertible, 0)
        self.assertEqual(res.documents, ())

    def test_shared_extension_names_do_not_collide(self):
        d = parse_descriptor(
            "[Intervals]\n10;20;0.1;0;0;0;0;0;1;raw\n20;30;0.1;0;0;0;0;0;1;raw\n40;50;0.1;0;0;0;0;0;1;r9\n"
        )
        names = output_names(d, "scan", FORMATS["asc"])
        self.assertEqual(names, {0: "scan_raw_1.asc", 1: "scan_raw_2.asc", 2: "scan_r9.asc"})
        res = convert_descriptor(d, lambda iv: _f32([1.0]), FORMATS["asc"], base_name="scan")
        self.assertEqual(len({doc.name for doc in res.documents}), 3)
        self.assertEqual(res.documents[1].text, "20.0000 1.0\n")

    def test_directory_resolver_end_to_end(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "Scan.dsc").write_text(DSC, encoding="utf-8")
            (root / "Scan.R01").write_bytes(_f32([10.0, 20.0, 30.0]))
            resolver = DirectoryResolver(root / "Scan.dsc")
            res = convert_descriptor(self.descriptor, resolver, FORMATS["csv_std"], base_name=resolver.base_name)
            self.assertEqual(res.single.name, "Scan_r01.csv")
            self.assertEqual(res.single.text, "10.0000,10.0\n10.0200,20.0\n10.0400,30.0\n")


class TestReadInterval(unittest.TestCase):
    def setUp(self):
        self.descriptor = parse_descriptor(DSC)
        self.resolver = MappingResolver({"scan.r01": _f32([1.0, 2.0, 3.0])}, "scan")

    def test_frame_columns(self):
        frame = read_interval(self.descriptor, 0, self.resolver, base_name="scan")
        self.assertEqual(frame.n_samples, 3)
        self.assertEqual(list(frame.df.columns), ["two_theta", "intensity"])
        np.testing.assert_allclose(frame.df["two_theta"].to_numpy(), [10.0, 10.02, 10.04])
        self.assertEqual(frame.source_name, "scan.r01")

    def test_ineligible_or_missing(self):
        self.assertIsNone(read_interval(self.descriptor, 1, self.resolver, base_name="scan"))
        self.assertIsNone(read_interval(self.descriptor, 2, self.resolver, base_name="scan"))

    def test_index_out_of_range(self):
        with self.assertRaises(IndexError):
            read_interval(self.descriptor, 3, self.resolver, base_name="scan")


if __name__ == "__main__":
    unittest.main()
