#
# Copyright 2024 fycross Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Build pipeline runner.

The runner drives a platform builder over the container images of one
invocation. For every image it pulls the image if needed, cleans the
image's target dirs, calls the builder and copies the resulting package
into the dist dir. Images share no state: all their outputs are namespaced
by the image id, so they may be built one after the other or in parallel
with the same result.

By default the first failure stops the run. With keep_going every image is
built and the failures are reported together in a BuildError.
"""

import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Sequence

from fycross.build_scripts.build_context import BuildContext
from fycross.build_scripts.build_errors import BuildError, EngineError, FycrossError
from fycross.build_scripts.build_utils import clean_target_dirs, copy_to_dist, format_elapsed_time
from fycross.dockers.container_engine import ContainerImage
from fycross.utils.context.result import CliResult
from fycross.utils.log import log_util


class PlatformBuilder(ABC):
    """Builds and packages the app inside one container image."""

    @abstractmethod
    def build(self, image: ContainerImage) -> str:
        """Return the file name of the package produced for image."""


def check_unique_ids(images: Sequence[ContainerImage]):
    seen = set()
    for image in images:
        if image.id() in seen:
            raise EngineError(f"duplicate target {image.id()}")
        seen.add(image.id())


def run_image(ctx: BuildContext, image: ContainerImage, builder: PlatformBuilder) -> CliResult:
    start = time.time()
    log_util.info(f"[i] Target: {image.os}/{image.arch}")
    try:
        image.prepare()
        clean_target_dirs(ctx, image)
        package_name = builder.build(image)
        dist_path = copy_to_dist(ctx, image, package_name)
    except FycrossError as e:
        if e.image_id is None:
            e.image_id = image.id()
        return CliResult(error=e, image_id=image.id(), elapsed=time.time() - start)

    elapsed = time.time() - start
    log_util.success(f"Package: {dist_path} ({format_elapsed_time(elapsed)})")
    return CliResult(value=package_name, image_id=image.id(), elapsed=elapsed)


def _run_sequential(ctx, images, builder, keep_going) -> List[CliResult]:
    results = []
    for image in images:
        result = run_image(ctx, image, builder)
        results.append(result)
        if result.is_failure() and not keep_going:
            raise result.error
    return results


def _run_parallel(ctx, images, builder, jobs, keep_going) -> List[CliResult]:
    results = [None] * len(images)
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = {
            executor.submit(run_image, ctx, image, builder): index
            for index, image in enumerate(images)
        }
        for future in as_completed(futures):
            result = future.result()
            results[futures[future]] = result
            if result.is_failure() and not keep_going:
                for pending in futures:
                    pending.cancel()
                raise result.error
    return results


def run_pipeline(
    ctx: BuildContext,
    images: Sequence[ContainerImage],
    builder: PlatformBuilder,
    jobs: int = 1,
    keep_going: bool = False,
) -> List[CliResult]:
    """
    Run builder once per image.

    Args:
        ctx: build context of the invocation
        images: container images, one per target architecture
        builder: platform specific build step
        jobs: number of images built at the same time
        keep_going: build every image even after a failure

    Returns:
        one successful CliResult per image, in image order

    Raises:
        FycrossError: the first failure, when keep_going is false
        BuildError: every failure, when keep_going is true
    """
    images = list(images)
    check_unique_ids(images)
    if not images:
        return []

    jobs = max(1, min(jobs or 1, len(images)))
    if jobs == 1:
        results = _run_sequential(ctx, images, builder, keep_going)
    else:
        log_util.info(f"[i] Building {len(images)} targets with {jobs} parallel jobs")
        results = _run_parallel(ctx, images, builder, jobs, keep_going)

    failures = [result.error for result in results if result.is_failure()]
    if failures:
        raise BuildError(failures)
    return results
