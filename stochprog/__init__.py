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

"""StochProg: horizontal generation of two-stage stochastic programs on Pyomo"""

from .version import __version__

from stochprog.common import (
    GenerationConfig,
    StochProgError,
    GenerationError,
    DistributedGenerationError,
)
from stochprog.core import (
    Scenario,
    Decisions,
    WaitAndSeeSubproblem,
    wait_and_see,
)
from stochprog.structure import (
    HorizontalStructure,
    ScenarioProblems,
    DistributedScenarioProblems,
    ThreadWorkerPool,
)
from stochprog.core.program import StochasticProgram, instantiate
