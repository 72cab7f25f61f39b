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

"""Horizontal generation of stochastic programs.

The horizontal structure stores, for every stage, an explicit list of
scenario subproblems: each stage-2 scenario becomes one standalone
wait-and-see model.  The first stage is generated once, on a shared
proxy model, before any stage-2 subproblem is built.
"""

import enum
import logging

from pyomo.common.errors import MouseTrap
from pyomo.common.timing import TicTocTimer
from pyomo.environ import ConcreteModel

from stochprog.common.errors import GenerationError
from stochprog.core.decisions import DecisionStore
from stochprog.structure.scenarioproblems import (
    ScenarioProblems,
    DistributedScenarioProblems,
)

logger = logging.getLogger('stochprog.structure')


class StageRole(enum.Enum):
    FirstStage = 1
    LaterStage = 2

    @classmethod
    def of(cls, stage):
        return cls.FirstStage if stage == 1 else cls.LaterStage


class HorizontalStructure(object):
    """Per-stage scenario subproblems, the first-stage proxy model and the
    decision registries of a stochastic program with ``num_stages``
    stages.

    If a worker pool is given, the scenarios of stages 2..N are held in
    :py:class:`DistributedScenarioProblems` partitioned across its
    workers; otherwise they are held in-process.
    """

    def __init__(self, num_stages=2, pool=None):
        if num_stages < 2:
            raise ValueError(
                "A stochastic program needs at least two stages (received %s)"
                % (num_stages,)
            )
        self.num_stages = num_stages
        self.decisions = DecisionStore(num_stages)
        self.proxy = ConcreteModel(name='first_stage')
        self.proxy_generated = False
        self._scenarioproblems = {1: ScenarioProblems(stage=1)}
        for stage in range(2, num_stages + 1):
            if pool is None:
                self._scenarioproblems[stage] = ScenarioProblems(stage=stage)
            else:
                self._scenarioproblems[stage] = DistributedScenarioProblems(
                    pool, stage=stage
                )

    @property
    def is_distributed(self):
        return self._scenarioproblems[self.num_stages].is_distributed

    def _check_stage(self, stage):
        if not 1 <= stage <= self.num_stages:
            raise GenerationError(
                "Stage %s not in range 1 to %s." % (stage, self.num_stages)
            )

    def scenarioproblems(self, stage):
        self._check_stage(stage)
        return self._scenarioproblems[stage]

    def num_scenarios(self, stage):
        return self.scenarioproblems(stage).num_scenarios()

    def num_subproblems(self, stage):
        return self.scenarioproblems(stage).num_subproblems()

    def stage_probability(self, stage):
        return self.scenarioproblems(stage).probability()

    def clear(self):
        """Clear the generated problems of every stage, in ascending order"""
        for stage in range(1, self.num_stages + 1):
            self.clear_stage(stage)

    def clear_stage(self, stage):
        """Drop the generated problems of one stage, keeping its scenarios.

        Clearing stage 1 replaces the first-stage proxy with an empty
        model so the first stage can be generated again.  Decision
        registries are never cleared.
        """
        self._check_stage(stage)
        if stage == 1 and self.proxy_generated:
            self.proxy = ConcreteModel(name='first_stage')
            self.proxy_generated = False
        self._scenarioproblems[stage].clear()

    def __repr__(self):
        return "HorizontalStructure(num_stages=%s, distributed=%s)" % (
            self.num_stages,
            self.is_distributed,
        )


def generate(program, structure):
    """Generate every stage of ``program`` into ``structure``.

    Stages are generated in ascending order: the stage-2 subproblems
    read the stage-1 decisions, which are only complete once stage 1
    has been generated.
    """
    for stage in range(1, structure.num_stages + 1):
        generate_stage(program, structure, stage)


def generate_stage(program, structure, stage):
    """Generate one stage of ``program`` into ``structure``"""
    timer = TicTocTimer()
    role = StageRole.of(stage)
    if role is StageRole.FirstStage:
        _generate_first_stage(program, structure)
    else:
        _generate_later_stage(program, structure, stage)
    timer.toc(
        "Generated stage %s", stage, logger=logger, level=logging.DEBUG
    )


def _check_first_stage_generator(program):
    if not program.has_generator('stage_1'):
        raise GenerationError(
            "First-stage problem not defined in stochastic program. "
            "Consider @stage 1."
        )


def _generate_first_stage(program, structure):
    _check_first_stage_generator(program)
    if structure.proxy_generated:
        return
    # The proxy declares into the stage-1 registry that every stage-2
    # subproblem is generated with.
    program.generator('stage_1')(
        structure.proxy, structure.decisions[1], program.stage_parameters(1)
    )
    structure.proxy_generated = True


def _generate_later_stage(program, structure, stage):
    if structure.num_stages > 2:
        raise MouseTrap(
            "Horizontal generation of stochastic programs with more than "
            "two stages is not supported (program has %s stages)."
            % (structure.num_stages,)
        )
    if stage != 2:
        raise GenerationError("Stage %s not available in two-stage model." % (stage,))
    _check_first_stage_generator(program)
    if not program.has_generator('stage_2'):
        raise GenerationError(
            "Second-stage problem not defined in stochastic program. "
            "Consider @stage 2."
        )
    config = program.config
    if config.check_probabilities and structure.num_scenarios(stage) > 0:
        p = structure.stage_probability(stage)
        if abs(p - 1.0) > config.probability_tolerance:
            logger.warning(
                "Scenario probabilities do not add up to one. "
                "The probability sum is given by %s" % (p,)
            )
    generate_horizontal(
        structure.scenarioproblems(stage),
        program.generator('stage_1'),
        program.generator('stage_2'),
        program.stage_parameters(1),
        program.stage_parameters(2),
        structure.decisions[stage - 1],
        program.optimizer,
    )


def generate_horizontal(
    scenarioproblems,
    stage_one_generator,
    stage_two_generator,
    stage_one_params,
    stage_two_params,
    decisions,
    optimizer,
):
    """Materialize the subproblems of every scenario that has none yet.

    Works on both :py:class:`ScenarioProblems` (in-process, in scenario
    order) and :py:class:`DistributedScenarioProblems` (one task per
    worker, joined before returning).
    """
    n = scenarioproblems.num_scenarios() - scenarioproblems.num_subproblems()
    logger.debug(
        "Generating %d wait-and-see subproblem(s) for stage %s",
        n,
        scenarioproblems.stage,
    )
    scenarioproblems.generate_horizontal(
        stage_one_generator,
        stage_two_generator,
        stage_one_params,
        stage_two_params,
        decisions,
        optimizer,
    )
