#!/usr/bin/env python3
"""
GrubWriter: regenerates grub.cfg by running grub-mkconfig.

run_grub_update() blocks; generate() runs it on a worker thread and
returns an id right away. Each generate() call gets exactly one
(id, ok) notification, through the callback if one is given, otherwise
on the `results` queue. Calls are not de-duplicated or queued behind
each other, so two in flight race for the same output file.
"""
# pylint: disable=broad-exception-caught
import itertools
import logging
import queue
import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

GenerateCallback = Callable[[int, bool], None]


class GrubWriter:
    """ Runs '<update_grub> -o <grub_cfg>' with a bounded wait """
    def __init__(self, update_grub: str = 'grub-mkconfig',
                 grub_cfg: str = '/boot/grub/grub.cfg', timeout: int = 30,
                 max_workers: int = 2):
        self.update_grub = update_grub
        self.grub_cfg = grub_cfg
        self.timeout = timeout
        self.results: "queue.Queue[Tuple[int, bool]]" = queue.Queue()
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='grub-mkconfig')

    def run_grub_update(self) -> Tuple[bool, str]:
        """
        Runs the update command and waits for it.

        Returns:
            (True, output) on success, (False, reason) otherwise
        """
        if not self.update_grub or not self.grub_cfg:
            return False, 'no update command or grub.cfg location known'
        cmd = [self.update_grub, '-o', self.grub_cfg]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True,
                                    check=False, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            return False, f'{cmd[0]} timed out after {self.timeout}s'
        except FileNotFoundError:
            return False, f'{cmd[0]!r} not found'
        except OSError as whynot:
            return False, f'cannot run {cmd[0]!r} [{whynot}]'

        if result.returncode != 0:
            return False, f'{cmd[0]} failed (return code {result.returncode}): {result.stderr.strip()}'
        return True, result.stderr.strip() or result.stdout.strip()

    def next_id(self) -> int:
        """ Hands out the next correlation id """
        with self._id_lock:
            return next(self._ids)

    def generate(self, callback: Optional[GenerateCallback] = None) -> int:
        """
        Starts a regeneration in the background.

        Returns:
            the correlation id reported with the outcome
        """
        gen_id = self.next_id()
        logger.info('start to generate a new grub configuration file [id=%d]', gen_id)
        self._executor.submit(self._generate_and_notify, gen_id, callback)
        return gen_id

    def _generate_and_notify(self, gen_id: int, callback: Optional[GenerateCallback]):
        try:
            ok, message = self.run_grub_update()
        except Exception as exce:
            ok, message = False, f'unexpected error [{exce}]'
        if ok:
            logger.info('generate grub configuration finished [id=%d]', gen_id)
        else:
            logger.error('generate grub configuration failed [id=%d]: %s', gen_id, message)

        if callback is None:
            self.results.put((gen_id, ok))
            return
        try:
            callback(gen_id, ok)
        except Exception:
            logger.exception('generate callback raised [id=%d]', gen_id)

    def shutdown(self, wait: bool = True):
        """ Stops accepting work; optionally waits for running updates """
        self._executor.shutdown(wait=wait)
