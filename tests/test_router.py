"""Tests for per-file classification and transforms."""

import os
import shutil
import tempfile
import unittest

import numpy as np
from PIL import Image

from ModBrew.core import BuildRun, FileKind, IgnoreRules, ImageDecodeError, classify, transform_file
from ModBrew.core import read_dds_header

from conftest import make_config, save_test_png, write_text


class RouterTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config = make_config(self.tmpdir)
        self.src = self.config.mod_path
        self.out = os.path.join(self.config.output_dir, "MyMod")
        os.makedirs(self.src)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def make_run(self, rules=(), dev=False):
        return BuildRun(
            source_root=self.src,
            output_dir=self.out,
            dev_build=dev,
            ignore_rules=IgnoreRules.parse(rules),
            config=self.config,
        )


class TestClassify(RouterTestCase):
    def test_branches(self):
        run = self.make_run(["*.psd"])
        cases = {
            "ignored_files.mod": FileKind.SKIP,
            "art.psd": FileKind.SKIP,
            "gfx/flags/usa.png": FileKind.FLAG,
            "gfx/flags/thumbnail.png": FileKind.FLAG,
            "thumbnail.png": FileKind.THUMBNAIL,
            "gfx/thumbnail.jpg": FileKind.THUMBNAIL,
            "gfx/interface/icon.png": FileKind.TEXTURE,
            "gfx/interface/icon.svg": FileKind.TEXTURE,
            "descriptor.mod": FileKind.DESCRIPTOR,
            "common/descriptor.mod": FileKind.COPY,
            "common/file.txt": FileKind.COPY,
            "LICENSE": FileKind.COPY,
        }
        for rel, expected in cases.items():
            with self.subTest(rel=rel):
                self.assertEqual(classify(rel, run), expected)

    def test_extension_comparison_is_case_sensitive(self):
        run = self.make_run()
        self.assertEqual(classify("gfx/icon.PNG", run), FileKind.COPY)

    def test_ignored_image_is_skipped_before_image_branch(self):
        run = self.make_run(["gfx/"])
        self.assertEqual(classify("gfx/flags/usa.png", run), FileKind.SKIP)


class TestTransformFile(RouterTestCase):
    def test_plain_copy_overwrites(self):
        write_text(os.path.join(self.src, "common", "file.txt"), "new")
        write_text(os.path.join(self.out, "common", "file.txt"), "old")
        written = transform_file(self.make_run(), "common/file.txt")
        dest = os.path.join(self.out, "common", "file.txt")
        self.assertEqual(written, [dest])
        with open(dest, encoding="utf-8") as f:
            self.assertEqual(f.read(), "new")

    def test_file_without_extension_copied(self):
        write_text(os.path.join(self.src, "LICENSE"), "MIT")
        written = transform_file(self.make_run(), "LICENSE")
        self.assertEqual(written, [os.path.join(self.out, "LICENSE")])

    def test_texture_becomes_dds(self):
        save_test_png(os.path.join(self.src, "gfx", "icon.png"), 12, 8)
        written = transform_file(self.make_run(), "gfx/icon.png")
        self.assertEqual(written, [os.path.join(self.out, "gfx", "icon.dds")])
        with open(written[0], "rb") as f:
            header = read_dds_header(f.read())
        self.assertEqual((header.width, header.height), (12, 8))

    def test_thumbnail_becomes_png(self):
        save_test_png(os.path.join(self.src, "thumbnail.tga"), 16, 16, alpha=False)
        written = transform_file(self.make_run(), "thumbnail.tga")
        self.assertEqual(written, [os.path.join(self.out, "thumbnail.png")])
        with Image.open(written[0]) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (16, 16))

    def test_flag_writes_three_dds_files(self):
        save_test_png(os.path.join(self.src, "gfx", "flags", "usa.png"), 164, 104)
        written = transform_file(self.make_run(), "gfx/flags/usa.png")
        expected = {
            os.path.join(self.out, "gfx", "flags", "usa.dds"): (82, 52),
            os.path.join(self.out, "gfx", "flags", "medium", "usa.dds"): (41, 26),
            os.path.join(self.out, "gfx", "flags", "small", "usa.dds"): (10, 7),
        }
        self.assertEqual(set(written), set(expected))
        for path, size in expected.items():
            with open(path, "rb") as f:
                header = read_dds_header(f.read())
            self.assertEqual((header.width, header.height), size)
        self.assertFalse(os.path.exists(os.path.join(self.out, "gfx", "flags", "usa.png")))

    def test_descriptor_rewritten(self):
        write_text(os.path.join(self.src, "descriptor.mod"), 'name="Foo"\n')
        written = transform_file(self.make_run(dev=True), "descriptor.mod")
        with open(written[0], encoding="utf-8") as f:
            text = f.read()
        out_posix = self.out.replace("\\", "/")
        self.assertEqual(text, f'name="Foo - Dev Version"\npath="{out_posix}"\n')

    def test_skip_writes_nothing(self):
        write_text(os.path.join(self.src, "art.psd"), "layers")
        self.assertEqual(transform_file(self.make_run(["*.psd"]), "art.psd"), [])
        self.assertFalse(os.path.exists(self.out))

    def test_decode_failure_writes_nothing(self):
        write_text(os.path.join(self.src, "gfx", "broken.png"), "not a png")
        with self.assertRaises(ImageDecodeError):
            transform_file(self.make_run(), "gfx/broken.png")
        self.assertFalse(os.path.exists(os.path.join(self.out, "gfx", "broken.dds")))

    def test_zero_alpha_normalized_in_output(self):
        arr = np.zeros((1, 2, 4), dtype=np.uint8)
        arr[0, 0] = (200, 100, 50, 0)
        arr[0, 1] = (200, 100, 50, 255)
        os.makedirs(os.path.join(self.src, "gfx"))
        Image.fromarray(arr).save(os.path.join(self.src, "gfx", "dot.png"))
        written = transform_file(self.make_run(), "gfx/dot.png")
        with open(written[0], "rb") as f:
            body = f.read()[128:]
        self.assertEqual(body, bytes([0, 0, 0, 0, 255, 200, 100, 50]))


if __name__ == "__main__":
    unittest.main(verbosity=2)
