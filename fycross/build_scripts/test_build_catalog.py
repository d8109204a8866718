"""
Tests for the target catalog and the container image environment.
"""

import unittest

from fycross.build_scripts.build_arch import Architecture
from fycross.build_scripts.build_catalog import (
    LINUX_IMAGE,
    LINUX_OS,
    OS_ENV_KEY,
    catalog_entry,
    supported_architectures,
)
from fycross.build_scripts.build_context import BuildContext
from fycross.build_scripts.build_errors import UnsupportedArchitectureError
from fycross.build_scripts.build_utils import goflags_ldflags, setup_container_images
from fycross.build_scripts.build_volume import Volume
from fycross.dockers.container_engine import ContainerEngine


def make_context(**kwargs):
    return BuildContext(name="myapp", volume=Volume("/tmp/work", None), **kwargs)


class TestCatalog(unittest.TestCase):
    def test_linux_supported_archs(self):
        self.assertEqual(
            supported_architectures(LINUX_OS),
            [Architecture.AMD64, Architecture.X86, Architecture.ARM, Architecture.ARM64],
        )

    def test_unknown_os(self):
        self.assertEqual(supported_architectures("plan9"), [])
        with self.assertRaises(UnsupportedArchitectureError):
            catalog_entry("plan9", Architecture.AMD64)

    def test_compiler_set_for_every_arch(self):
        for arch in supported_architectures(LINUX_OS):
            env = catalog_entry(LINUX_OS, arch).environment()
            self.assertTrue(env["CC"].startswith("zig cc -target "), arch)
            self.assertTrue(env["CXX"].startswith("zig c++ -target "), arch)
            self.assertEqual(env["GOARCH"], arch.value)

    def test_amd64_environment(self):
        env = catalog_entry(LINUX_OS, Architecture.AMD64).environment()
        self.assertEqual(
            env["CC"],
            "zig cc -target x86_64-linux-gnu -isystem /usr/include -L/usr/lib/x86_64-linux-gnu",
        )
        self.assertNotIn("GOARM", env)

    def test_arm_revision(self):
        env = catalog_entry(LINUX_OS, Architecture.ARM).environment()
        self.assertEqual(env["GOARM"], "7")
        self.assertIn("-target arm-linux-gnueabihf", env["CXX"])

    def test_386_library_dir(self):
        env = catalog_entry(LINUX_OS, Architecture.X86).environment()
        self.assertIn("-L/usr/lib/i386-linux-gnu", env["CC"])


class TestSetupContainerImages(unittest.TestCase):
    def setUp(self):
        self.engine = ContainerEngine("docker", "docker")

    def test_one_image_per_arch(self):
        images = setup_container_images(
            make_context(), self.engine, [Architecture.AMD64, Architecture.ARM64], LINUX_OS
        )
        self.assertEqual([i.id() for i in images], ["linux-amd64", "linux-arm64"])
        self.assertEqual(images[0].image, LINUX_IMAGE)
        self.assertEqual(images[1].env["GOARCH"], "arm64")
        self.assertIn("aarch64-linux-gnu", images[1].env["CC"])

    def test_os_entry_set_last(self):
        ctx = make_context(env=(("GOOS", "windows"), ("FOO", "bar")))
        images = setup_container_images(ctx, self.engine, supported_architectures(LINUX_OS), LINUX_OS)
        for image in images:
            self.assertEqual(image.env[OS_ENV_KEY], LINUX_OS)
            self.assertEqual(list(image.env)[-1], OS_ENV_KEY)
            self.assertEqual(image.env["FOO"], "bar")
            self.assertEqual(image.env["CGO_ENABLED"], "1")

    def test_toolchain_wins_over_user_env(self):
        ctx = make_context(env=(("CC", "gcc"),))
        image = setup_container_images(ctx, self.engine, [Architecture.AMD64], LINUX_OS)[0]
        self.assertTrue(image.env["CC"].startswith("zig cc"))

    def test_image_override(self):
        ctx = make_context(image="example.com/custom:1")
        images = setup_container_images(ctx, self.engine, [Architecture.AMD64, Architecture.ARM], LINUX_OS)
        self.assertEqual({i.image for i in images}, {"example.com/custom:1"})

    def test_ldflags(self):
        ctx = make_context(ldflags="-X main.version=1.2.3")
        image = setup_container_images(ctx, self.engine, [Architecture.AMD64], LINUX_OS)[0]
        self.assertEqual(image.env["GOFLAGS"], "-ldflags='-X main.version=1.2.3'")

    def test_goflags_ldflags_quoting(self):
        self.assertEqual(goflags_ldflags("-s -w"), "-ldflags='-s -w'")
        self.assertEqual(goflags_ldflags("-X 'main.name=my app'"), "-ldflags=\"-X 'main.name=my app'\"")

    def test_images_do_not_share_env(self):
        images = setup_container_images(
            make_context(), self.engine, [Architecture.AMD64, Architecture.ARM], LINUX_OS
        )
        images[0].set_env("EXTRA", "1")
        self.assertNotIn("EXTRA", images[1].env)


if __name__ == "__main__":
    unittest.main()
