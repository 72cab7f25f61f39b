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

from stochprog.common.config import GenerationConfig
from stochprog.common.errors import GenerationError
from stochprog.core.scenario import Scenario
from stochprog.structure.horizontal import HorizontalStructure, generate
from stochprog.structure.workers import ThreadWorkerPool

logger = logging.getLogger('stochprog.core')


def stage_tag(stage):
    """Return the generator key of a stage (``2`` -> ``'stage_2'``)"""
    if isinstance(stage, str):
        return stage
    return 'stage_%d' % (stage,)


class StochasticProgram(object):
    """A stochastic program with ``num_stages`` stages, generated
    horizontally (one wait-and-see subproblem per scenario).

    Stage generators are registered with :py:meth:`stage`::

        sp = StochasticProgram(optimizer='glpk')

        @sp.stage(1)
        def first_stage(model, decisions, params):
            decisions.declare(model, 'x', domain=NonNegativeReals)
            ...

        @sp.stage(2)
        def second_stage(model, scenario, decisions, params):
            ...

        sp.add_scenarios(scenarios)
        sp.generate()

    Keyword arguments are options of :py:class:`GenerationConfig`.
    """

    CONFIG = GenerationConfig()

    def __init__(self, num_stages=2, optimizer=None, **kwds):
        self.config = self.CONFIG(kwds)
        self.num_stages = num_stages
        self.optimizer = optimizer
        self._generators = {}
        self._stage_params = {s: None for s in range(1, num_stages + 1)}
        workers = self.config.workers
        if workers is None:
            self._pool, self._owns_pool = None, False
        elif hasattr(workers, 'submit'):
            self._pool, self._owns_pool = workers, False
        else:
            self._pool, self._owns_pool = ThreadWorkerPool(workers), True
        self.structure = HorizontalStructure(num_stages, pool=self._pool)

    #
    # Generators and parameters
    #

    def stage(self, stage):
        """Decorator registering the generator of ``stage``"""

        def decorator(fn):
            self.add_generator(stage, fn)
            return fn

        return decorator

    def add_generator(self, stage, generator):
        if not callable(generator):
            raise TypeError(
                "Stage generator must be callable (received %s)"
                % (type(generator).__name__,)
            )
        if not isinstance(stage, str):
            self._check_stage(stage)
        self._generators[stage_tag(stage)] = generator

    def has_generator(self, tag):
        return stage_tag(tag) in self._generators

    def generator(self, tag):
        try:
            return self._generators[stage_tag(tag)]
        except KeyError:
            raise GenerationError(
                "No generator '%s' defined in stochastic program." % (stage_tag(tag),)
            ) from None

    def stage_parameters(self, stage):
        self._check_stage(stage)
        return self._stage_params[stage]

    def set_stage_parameters(self, stage, params):
        self._check_stage(stage)
        self._stage_params[stage] = params

    def set_optimizer(self, optimizer):
        """Set the optimizer bound to subproblems generated from now on"""
        self.optimizer = optimizer

    def _check_stage(self, stage):
        if not 1 <= stage <= self.num_stages:
            raise GenerationError(
                "Stage %s not in range 1 to %s." % (stage, self.num_stages)
            )

    #
    # Scenarios
    #

    def _scenario_stage(self, stage):
        self._check_stage(stage)
        if stage == 1:
            raise ValueError("The first stage of a stochastic program has no scenarios")
        return self.structure.scenarioproblems(stage)

    def add_scenario(self, scenario, stage=2):
        self._scenario_stage(stage).add_scenario(scenario)

    def add_scenarios(self, scenarios, stage=2):
        self._scenario_stage(stage).add_scenarios(scenarios)

    def sample(self, sampler, n, stage=2):
        """Draw ``n`` scenarios from ``sampler`` and add them to ``stage``.

        ``sampler`` is called with no arguments.  If it returns a
        :py:class:`Scenario`, that scenario is added as-is; any other
        return value is used as the payload of a new scenario with
        probability ``1/n``.
        """
        if n < 1:
            raise ValueError("Expected a positive number of samples (received %s)" % (n,))
        container = self._scenario_stage(stage)
        for _ in range(n):
            draw = sampler()
            if not isinstance(draw, Scenario):
                draw = Scenario(1.0 / n, data=draw)
            container.add_scenario(draw)
        logger.debug("Sampled %d scenario(s) for stage %s", n, stage)

    def scenarios(self, stage=2):
        return self._scenario_stage(stage).scenarios()

    def scenario(self, i, stage=2):
        return self._scenario_stage(stage).scenario(i)

    def num_scenarios(self, stage=2):
        return self.structure.num_scenarios(stage)

    def probability(self, stage=2):
        return self.structure.stage_probability(stage)

    #
    # Generated problems
    #

    @property
    def first_stage(self):
        """The shared first-stage model"""
        return self.structure.proxy

    def decisions(self, stage=1):
        self._check_stage(stage)
        return self.structure.decisions[stage]

    def num_subproblems(self, stage=2):
        return self.structure.num_subproblems(stage)

    def subproblems(self, stage=2):
        return self._scenario_stage(stage).subproblems()

    def subproblem(self, i, stage=2):
        return self._scenario_stage(stage).subproblem(i)

    @property
    def is_generated(self):
        if not self.structure.proxy_generated:
            return False
        return all(
            self.structure.num_subproblems(s) == self.structure.num_scenarios(s)
            for s in range(2, self.num_stages + 1)
        )

    def generate(self):
        """Generate the first stage and every missing subproblem"""
        generate(self, self.structure)

    def clear(self):
        self.structure.clear()

    def clear_stage(self, stage):
        self.structure.clear_stage(stage)

    def close(self):
        """Shut down the worker pool, if this program started one"""
        if self._owns_pool:
            self._pool.shutdown()
            self._owns_pool = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "StochasticProgram(num_stages=%s, scenarios=%s, subproblems=%s)" % (
            self.num_stages,
            self.structure.num_scenarios(self.num_stages),
            self.structure.num_subproblems(self.num_stages),
        )


def instantiate(
    stage_one,
    stage_two,
    scenarios,
    optimizer=None,
    stage_one_params=None,
    stage_two_params=None,
    **kwds
):
    """Build, populate and generate a two-stage stochastic program.

    Keyword arguments are options of :py:class:`GenerationConfig`
    (e.g., ``workers=2``).

    Returns
    -------
    StochasticProgram

    """
    sp = StochasticProgram(2, optimizer=optimizer, **kwds)
    sp.add_generator(1, stage_one)
    sp.add_generator(2, stage_two)
    sp.set_stage_parameters(1, stage_one_params)
    sp.set_stage_parameters(2, stage_two_params)
    sp.add_scenarios(scenarios)
    sp.generate()
    return sp
