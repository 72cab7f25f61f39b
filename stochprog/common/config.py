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

from collections.abc import Sequence
from typing import Optional

from pyomo.common.config import (
    ConfigDict,
    ConfigValue,
    Bool,
    NonNegativeFloat,
    PositiveInt,
)


def WorkerSpec(val):
    """Domain validator for the ``workers`` option.

    Accepts ``None`` (generate in-process), a positive int (that many
    anonymous workers), a sequence of worker names, or an existing
    worker pool (any object with ``names`` and ``submit``).
    """
    if val is None:
        return None
    if hasattr(val, 'submit') and hasattr(val, 'names'):
        return val
    if isinstance(val, str):
        return (val,)
    if isinstance(val, Sequence):
        return tuple(str(v) for v in val)
    return PositiveInt(val)


class GenerationConfig(ConfigDict):
    """
    Options controlling the generation of stochastic program subproblems
    """

    def __init__(
        self,
        description=None,
        doc=None,
        implicit=False,
        implicit_domain=None,
        visibility=0,
    ):
        super().__init__(
            description=description,
            doc=doc,
            implicit=implicit,
            implicit_domain=implicit_domain,
            visibility=visibility,
        )

        self.check_probabilities: bool = self.declare(
            'check_probabilities',
            ConfigValue(
                domain=Bool,
                default=True,
                description="If True, warn when the scenario probabilities "
                "of a stage do not add up to one.",
            ),
        )
        self.probability_tolerance: float = self.declare(
            'probability_tolerance',
            ConfigValue(
                domain=NonNegativeFloat,
                default=1e-6,
                description="Absolute tolerance used when checking that the "
                "scenario probabilities of a stage add up to one.",
            ),
        )
        self.workers: Optional[object] = self.declare(
            'workers',
            ConfigValue(
                domain=WorkerSpec,
                default=None,
                description="Workers that own the scenario subproblems.",
                doc="""
                Workers that own the scenario subproblems.

                If None, all subproblems are generated in-process.
                Otherwise this is the number of workers, a list of
                worker names, or a worker pool object.  Scenarios are
                partitioned across the workers and each worker
                generates its own share of the subproblems.""",
            ),
        )
