#  ___________________________________________________________________________
#
#  Pyomo: Python Optimization Modeling Objects
#  Copyright (c) 2008-2025
#  National Technology and Engineering Solutions of Sandia, LLC
#  Under the terms of Contract DE-NA0003525 with National Technology and
#  Engineering Solutions of Sandia, LLC, the U.S. Government retains certain
#  rights in this software.
#  This software is distributed under the 3-clause BSD License.
#  ___________________________________________________________________________

import logging
from concurrent.futures import ThreadPoolExecutor, wait

logger = logging.getLogger('stochprog.structure')


def worker_names(workers):
    """Normalize a worker specification to a tuple of unique names"""
    if isinstance(workers, int):
        if workers < 1:
            raise ValueError("Expected a positive number of workers")
        return tuple('worker_%d' % (i,) for i in range(1, workers + 1))
    if isinstance(workers, str):
        return (workers,)
    names = tuple(str(w) for w in workers)
    if not names:
        raise ValueError("Expected at least one worker name")
    if len(set(names)) != len(names):
        raise ValueError("Duplicate worker names in %s" % (names,))
    return names


class ThreadWorkerPool(object):
    """A set of named workers, each running its tasks on its own thread.

    Every worker is backed by a single-threaded executor, so tasks sent
    to one worker run one at a time, in submission order.  State that
    is only ever touched from tasks on one worker is therefore owned
    exclusively by that worker.

    Examples
    --------
    >>> with ThreadWorkerPool(2) as pool:
    ...     pool.run('worker_2', sum, [1, 2, 3])
    6

    """

    def __init__(self, workers):
        self._names = worker_names(workers)
        self._executors = {
            name: ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
            for name in self._names
        }
        logger.info("Started %d worker(s): %s", len(self._names), self._names)

    @property
    def names(self):
        return self._names

    def submit(self, worker, fn, *args, **kwds):
        """Schedule ``fn(*args, **kwds)`` on ``worker`` and return a Future"""
        try:
            executor = self._executors[worker]
        except KeyError:
            raise ValueError(
                "Unknown worker '%s' (known workers: %s)" % (worker, self._names)
            ) from None
        return executor.submit(fn, *args, **kwds)

    def run(self, worker, fn, *args, **kwds):
        """Run ``fn(*args, **kwds)`` on ``worker`` and block for the result"""
        return self.submit(worker, fn, *args, **kwds).result()

    def shutdown(self, wait=True):
        for executor in self._executors.values():
            executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.shutdown()


def join(futures):
    """Wait for every future in ``futures`` (a dict keyed by worker name).

    Returns ``(results, failures)``: two dicts keyed by worker name, in
    the order of ``futures``.  Exceptions raised by the tasks are
    collected in ``failures``, not raised.
    """
    wait(list(futures.values()))
    results = {}
    failures = {}
    for name, future in futures.items():
        err = future.exception()
        if err is None:
            results[name] = future.result()
        else:
            failures[name] = err
    return results, failures
