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

from pyomo.common.errors import PyomoException, format_exception


class StochProgError(PyomoException):
    """
    Exception class for other stochprog exceptions to inherit from,
    allowing stochprog exceptions to be caught in a general way.
    """


class GenerationError(StochProgError, RuntimeError):
    """
    Exception class used when a stochastic program is not configured
    well enough to be generated (e.g., a missing stage generator or a
    stage index outside the range of the program).
    """


class DistributedGenerationError(GenerationError):
    """Raised after a distributed generation pass has joined all of its
    workers, if any of them failed.

    The ``failures`` attribute maps each failing worker name to the
    exception raised on that worker.  Subproblems already generated by
    the other workers are left in place.

    """

    def __init__(self, failures):
        self.failures = dict(failures)
        super().__init__(
            "Generation failed on %d worker(s): %s"
            % (
                len(self.failures),
                "; ".join(
                    "%s: %s: %s" % (name, type(err).__name__, err)
                    for name, err in self.failures.items()
                ),
            )
        )

    def __str__(self):
        return format_exception(
            super().__str__(),
            epilog="Clear the affected stage and regenerate to recover.",
            exception=self,
        )
