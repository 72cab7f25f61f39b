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

from stochprog.structure.workers import ThreadWorkerPool
from stochprog.structure.scenarioproblems import (
    ScenarioProblems,
    DistributedScenarioProblems,
)
from stochprog.structure.horizontal import (
    HorizontalStructure,
    StageRole,
    generate,
    generate_stage,
    generate_horizontal,
)
