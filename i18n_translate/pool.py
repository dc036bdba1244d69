"""
Fixed-size worker pool that drains the job list.

All jobs go into one queue.Queue followed by one sentinel per worker; every
worker takes jobs until it sees a sentinel, so each job is handled by exactly
one worker. Outcomes travel back on a second queue and are collected after all
workers have been joined.

A failing job is logged and recorded; it never stops the other workers.
Targets are partitioned by (language, relative path), so no two workers write
the same file and no locking is needed beyond the queues.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Callable

from tqdm import tqdm

import config
from i18n_translate.exceptions import ResponseError
from i18n_translate.jobs import Job

logger = logging.getLogger(__name__)

# translate_fn(source_text, source_lang, target_lang) -> translated text
TranslateFn = Callable[[str, str, str], str]


@dataclass(frozen=True)
class JobOutcome:
    job: Job
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PoolReport:
    """Aggregate result of one pool run, outcomes in job-list order."""

    outcomes: list[JobOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def failures(self) -> list[JobOutcome]:
        return [o for o in self.outcomes if not o.ok]


def translate_job(job: Job, translate_fn: TranslateFn, source_lang: str) -> None:
    """
    Run one job: make the target directory, read, translate, write.

    The written text is the translation with surrounding whitespace removed;
    an existing target file is overwritten. Any exception propagates to the
    caller.
    """
    # exist_ok: workers sharing a language directory race on creating it
    job.target_path.parent.mkdir(parents=True, exist_ok=True)

    source_text = job.source_path.read_text(encoding="utf-8")
    translated = translate_fn(source_text, source_lang, job.language_code)
    job.target_path.write_text(translated.strip(), encoding="utf-8")


def _worker(
    jobs: queue.Queue,
    results: queue.Queue,
    translate_fn: TranslateFn,
    source_lang: str,
    bar: tqdm,
) -> None:
    while True:
        item = jobs.get()
        if item is None:
            return
        index, job = item

        logger.info("Translating %s to %s...", job.relative_path, job.language_code)
        try:
            translate_job(job, translate_fn, source_lang)
        except Exception as exc:
            logger.error(
                "Error translating %s to %s: %s", job.source_path, job.language_code, exc
            )
            if isinstance(exc, ResponseError) and exc.raw is not None:
                logger.debug("Raw model response for %s (%s):\n%s",
                             job.source_path, job.language_code, exc.raw)
            results.put((index, JobOutcome(job, exc)))
        else:
            logger.info("✓ Translated %s to %s", job.relative_path, job.language_code)
            results.put((index, JobOutcome(job)))
        finally:
            bar.update(1)


def run_jobs(
    jobs: list[Job],
    translate_fn: TranslateFn,
    source_lang: str,
    concurrency: int = config.CONCURRENCY,
    progress: bool = True,
) -> PoolReport:
    """
    Translate every job with `concurrency` worker threads.

    Args:
        jobs:         the job list from build_jobs()
        translate_fn: called once per job as (source_text, source_lang, target_lang)
        source_lang:  language code of the source files
        concurrency:  number of workers; values below 1 are treated as 1
        progress:     show a tqdm progress bar

    Returns:
        A PoolReport with one outcome per job. Only returns once every job
        was attempted and every worker has exited.
    """
    if concurrency < 1:
        logger.warning("Invalid concurrency %d, using 1 worker", concurrency)
        concurrency = 1

    job_queue: queue.Queue = queue.Queue()
    result_queue: queue.Queue = queue.Queue()
    for index, job in enumerate(jobs):
        job_queue.put((index, job))
    for _ in range(concurrency):
        job_queue.put(None)

    with tqdm(total=len(jobs), desc="  Translating files", unit="file",
              disable=not progress) as bar:
        workers = [
            threading.Thread(
                target=_worker,
                args=(job_queue, result_queue, translate_fn, source_lang, bar),
                name=f"translate-worker-{i}",
                daemon=True,
            )
            for i in range(concurrency)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

    collected = []
    while not result_queue.empty():
        collected.append(result_queue.get_nowait())
    collected.sort(key=lambda item: item[0])
    return PoolReport(outcomes=[outcome for _, outcome in collected])
