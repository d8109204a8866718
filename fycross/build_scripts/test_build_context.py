"""
Tests for the build context and the volume mapping.
"""

import os
import shutil
import tempfile
import unittest

from fycross.build_scripts.build_context import (
    DEFAULT_APP_VERSION,
    DEFAULT_ICON_NAME,
    METADATA_FILE_NAME,
    make_default_context,
    parse_env_flags,
    parse_tags,
)
from fycross.build_scripts.build_errors import ContextCreationError
from fycross.build_scripts.build_volume import (
    CACHE_DIR_CONTAINER,
    WORK_DIR_CONTAINER,
    join_path_container,
    make_volume,
)
from fycross.utils.context.namespace import CliNameSpace

FYNE_APP_TOML = """
[Details]
Icon = "assets/icon.png"
Name = "Hello Fyne"
ID = "com.example.hello"
Version = "2.1.0"
Build = 7
"""


class TestVolume(unittest.TestCase):
    def setUp(self):
        self.work_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def test_dirs(self):
        volume = make_volume(self.work_dir, cache_dir=os.path.join(self.work_dir, "cache"))
        self.assertEqual(volume.work_dir_container(), WORK_DIR_CONTAINER)
        self.assertEqual(volume.bin_dir_container(), "/app/fycross/bin")
        self.assertEqual(volume.tmp_dir_container(), "/app/fycross/tmp")
        self.assertEqual(volume.dist_dir_container(), "/app/fycross/dist")
        self.assertEqual(volume.bin_dir_host(), os.path.join(self.work_dir, "fycross", "bin"))
        self.assertEqual(
            volume.mounts(),
            [(self.work_dir, WORK_DIR_CONTAINER), (os.path.join(self.work_dir, "cache"), CACHE_DIR_CONTAINER)],
        )

    def test_no_cache(self):
        volume = make_volume(self.work_dir, no_cache=True)
        self.assertEqual(volume.mounts(), [(self.work_dir, WORK_DIR_CONTAINER)])

    def test_missing_work_dir(self):
        with self.assertRaises(ContextCreationError):
            make_volume(os.path.join(self.work_dir, "missing"))

    def test_cache_dir_is_created(self):
        cache_dir = os.path.join(self.work_dir, "nope", "cache")
        volume = make_volume(self.work_dir, cache_dir=cache_dir)
        self.assertTrue(os.path.isdir(cache_dir))
        self.assertEqual(volume.mounts()[-1], (cache_dir, CACHE_DIR_CONTAINER))

    def test_cache_dir_not_creatable(self):
        blocker = os.path.join(self.work_dir, "blocker")
        with open(blocker, "w") as f:
            f.write("")
        with self.assertRaises(ContextCreationError):
            make_volume(self.work_dir, cache_dir=os.path.join(blocker, "cache"))

    def test_join_path_container(self):
        self.assertEqual(join_path_container("/app", "fycross", "tmp", "linux-arm"), "/app/fycross/tmp/linux-arm")


class TestMakeDefaultContext(unittest.TestCase):
    def setUp(self):
        self.work_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def flags(self, **kwargs):
        kwargs.setdefault("dir", self.work_dir)
        kwargs.setdefault("no_cache", True)
        return CliNameSpace(**kwargs)

    def test_defaults(self):
        ctx = make_default_context(self.flags())
        self.assertEqual(ctx.name, os.path.basename(self.work_dir))
        self.assertFalse(ctx.release)
        self.assertEqual(ctx.app_build, 1)
        self.assertEqual(ctx.app_version, DEFAULT_APP_VERSION)
        self.assertEqual(ctx.icon, DEFAULT_ICON_NAME)
        self.assertEqual(ctx.work_dir_container(), WORK_DIR_CONTAINER)
        self.assertEqual(ctx.work_dir_host(), self.work_dir)
        self.assertIsNone(ctx.image)

    def test_flags(self):
        ctx = make_default_context(
            self.flags(
                name="myapp",
                release=True,
                app_id="com.example.myapp",
                app_version="3.0.0",
                app_build=12,
                tags="gles, wayland",
                env=["FOO=bar", "EMPTY="],
                image="example.com/img",
            )
        )
        self.assertEqual(ctx.name, "myapp")
        self.assertTrue(ctx.release)
        self.assertEqual(ctx.app_id, "com.example.myapp")
        self.assertEqual(ctx.app_version, "3.0.0")
        self.assertEqual(ctx.app_build, 12)
        self.assertEqual(ctx.tags, ("gles", "wayland"))
        self.assertEqual(ctx.env, (("FOO", "bar"), ("EMPTY", "")))
        self.assertEqual(ctx.image, "example.com/img")

    def test_package_dir(self):
        os.makedirs(os.path.join(self.work_dir, "cmd", "app"))
        ctx = make_default_context(self.flags(), "cmd/app")
        self.assertEqual(ctx.name, "app")
        self.assertEqual(ctx.work_dir_container(), "/app/cmd/app")
        self.assertEqual(ctx.work_dir_host(), os.path.join(self.work_dir, "cmd", "app"))

    def test_metadata(self):
        with open(os.path.join(self.work_dir, METADATA_FILE_NAME), "w") as f:
            f.write(FYNE_APP_TOML)
        ctx = make_default_context(self.flags())
        self.assertEqual(ctx.name, "Hello Fyne")
        self.assertEqual(ctx.app_id, "com.example.hello")
        self.assertEqual(ctx.app_version, "2.1.0")
        self.assertEqual(ctx.app_build, 7)
        self.assertEqual(ctx.icon, "assets/icon.png")
        self.assertEqual(ctx.icon_host(), os.path.join(self.work_dir, "assets/icon.png"))

    def test_flags_win_over_metadata(self):
        with open(os.path.join(self.work_dir, METADATA_FILE_NAME), "w") as f:
            f.write(FYNE_APP_TOML)
        ctx = make_default_context(self.flags(name="cli-name", app_build=9))
        self.assertEqual(ctx.name, "cli-name")
        self.assertEqual(ctx.app_build, 9)

    def test_invalid_metadata(self):
        with open(os.path.join(self.work_dir, METADATA_FILE_NAME), "w") as f:
            f.write("[Details\nName = ")
        with self.assertRaises(ContextCreationError):
            make_default_context(self.flags())

    def test_invalid_build_number(self):
        with self.assertRaises(ContextCreationError):
            make_default_context(self.flags(app_build=0))

    def test_missing_package_dir(self):
        with self.assertRaises(ContextCreationError):
            make_default_context(self.flags(), "missing")

    def test_package_outside_work_dir(self):
        with self.assertRaises(ContextCreationError):
            make_default_context(self.flags(), "../elsewhere")

    def test_invalid_env(self):
        with self.assertRaises(ContextCreationError):
            parse_env_flags(["NOVALUE"])
        with self.assertRaises(ContextCreationError):
            parse_env_flags(["=value"])

    def test_parse_tags(self):
        self.assertEqual(parse_tags(None), ())
        self.assertEqual(parse_tags("a,,b "), ("a", "b"))

    def test_context_is_frozen(self):
        ctx = make_default_context(self.flags())
        with self.assertRaises(AttributeError):
            ctx.name = "other"


if __name__ == "__main__":
    unittest.main()
