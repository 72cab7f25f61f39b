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

"""Containers pairing the scenarios of a stage with their subproblems.

Both containers keep scenarios in insertion order and materialize
subproblems strictly in that order.  A ``generated_count`` watermark
records how many scenarios already have a subproblem; generation only
ever starts at the watermark, so calling it again without clearing
does not rebuild or duplicate anything.
"""

import logging

from stochprog.common.errors import DistributedGenerationError
from stochprog.core.decisions import Decisions
from stochprog.core.scenario import Scenario, stage_probability
from stochprog.core.subproblem import resolve_optimizer, wait_and_see
from stochprog.structure.workers import join

logger = logging.getLogger('stochprog.structure')


def _check_scenario(scenario):
    if not isinstance(scenario, Scenario):
        raise TypeError(
            "Expected a Scenario object (received %s)" % (type(scenario).__name__,)
        )
    return scenario


class ScenarioProblems(object):
    """The scenarios of one stage and their materialized subproblems"""

    is_distributed = False

    def __init__(self, stage=2, scenarios=()):
        self.stage = stage
        self._scenarios = []
        self._problems = []
        self._generated_count = 0
        self.add_scenarios(scenarios)

    @property
    def generated_count(self):
        return self._generated_count

    def num_scenarios(self):
        return len(self._scenarios)

    def num_subproblems(self):
        return self._generated_count

    def scenarios(self):
        return tuple(self._scenarios)

    def subproblems(self):
        return tuple(self._problems)

    def scenario(self, i):
        return self._scenarios[i]

    def subproblem(self, i):
        if i < 0:
            i += self._generated_count
        if not 0 <= i < self._generated_count:
            raise IndexError(
                "No subproblem %s in stage %s (%d of %d generated)"
                % (i, self.stage, self._generated_count, len(self._scenarios))
            )
        return self._problems[i]

    def probability(self):
        return stage_probability(self._scenarios)

    def add_scenario(self, scenario):
        self._scenarios.append(_check_scenario(scenario))

    def add_scenarios(self, scenarios):
        for scenario in scenarios:
            self.add_scenario(scenario)

    def generate_horizontal(
        self,
        stage_one_generator,
        stage_two_generator,
        stage_one_params,
        stage_two_params,
        decisions,
        optimizer,
    ):
        """Generate the subproblems of every scenario past the watermark"""
        for i in range(self._generated_count, len(self._scenarios)):
            self._problems.append(
                wait_and_see(
                    stage_one_generator,
                    stage_two_generator,
                    stage_one_params,
                    stage_two_params,
                    self._scenarios[i],
                    decisions,
                    optimizer,
                )
            )
            self._generated_count += 1

    def clear(self):
        """Drop all subproblems; the scenarios are kept"""
        self._problems = []
        self._generated_count = 0

    def __len__(self):
        return len(self._scenarios)

    def __repr__(self):
        return "ScenarioProblems(stage=%s, %d/%d generated)" % (
            self.stage,
            self._generated_count,
            len(self._scenarios),
        )


def _generate_shard(
    shard,
    shard_decisions,
    stage_one_generator,
    stage_two_generator,
    stage_one_params,
    stage_two_params,
    decisions,
    optimizer,
):
    # Runs on the worker that owns the shard
    shard_decisions.update(decisions)
    shard.generate_horizontal(
        stage_one_generator,
        stage_two_generator,
        stage_one_params,
        stage_two_params,
        shard_decisions,
        resolve_optimizer(optimizer),
    )
    return shard.num_subproblems()


class DistributedScenarioProblems(object):
    """Scenarios and subproblems partitioned across named workers.

    Each worker of ``pool`` owns one :py:class:`ScenarioProblems` shard
    and a private copy of the previous stage's decisions.  New scenarios
    go to the shard holding the fewest scenarios (the first such worker
    wins ties), so the shards stay balanced and each shard keeps the
    relative insertion order of its scenarios.  The container also
    keeps the global insertion order, which ``scenario(i)`` and
    ``subproblem(i)`` follow.

    All work on a shard (generation and clearing) is run on the worker
    that owns it.

    """

    is_distributed = True

    def __init__(self, pool, stage=2, scenarios=()):
        self.stage = stage
        self._pool = pool
        self._shards = {name: ScenarioProblems(stage) for name in pool.names}
        self._decisions = {name: Decisions(stage - 1) for name in pool.names}
        self._order = []
        self.add_scenarios(scenarios)

    @property
    def pool(self):
        return self._pool

    @property
    def workers(self):
        return tuple(self._shards)

    def shard(self, worker):
        return self._shards[worker]

    def decisions(self, worker):
        return self._decisions[worker]

    def num_scenarios(self):
        return len(self._order)

    def num_subproblems(self):
        return sum(shard.num_subproblems() for shard in self._shards.values())

    def scenarios(self):
        return tuple(self._shards[w].scenario(j) for w, j in self._order)

    def subproblems(self):
        return tuple(
            self._shards[w].subproblem(j)
            for w, j in self._order
            if j < self._shards[w].num_subproblems()
        )

    def scenario(self, i):
        w, j = self._order[i]
        return self._shards[w].scenario(j)

    def subproblem(self, i):
        w, j = self._order[i]
        return self._shards[w].subproblem(j)

    def probability(self):
        return stage_probability(self.scenarios())

    def add_scenario(self, scenario):
        _check_scenario(scenario)
        worker = min(self._shards, key=lambda w: self._shards[w].num_scenarios())
        shard = self._shards[worker]
        self._order.append((worker, shard.num_scenarios()))
        shard.add_scenario(scenario)

    def add_scenarios(self, scenarios):
        for scenario in scenarios:
            self.add_scenario(scenario)

    def generate_horizontal(
        self,
        stage_one_generator,
        stage_two_generator,
        stage_one_params,
        stage_two_params,
        decisions,
        optimizer,
    ):
        """Generate every shard on its own worker and wait for all of them.

        Failures on any worker are collected once every worker has
        finished and raised together as a
        :py:class:`DistributedGenerationError`; subproblems generated
        by the other workers are kept.
        """
        futures = {}
        for worker, shard in self._shards.items():
            logger.info(
                "Dispatching stage %s generation of %d scenario(s) to %s",
                self.stage,
                shard.num_scenarios() - shard.num_subproblems(),
                worker,
            )
            futures[worker] = self._pool.submit(
                worker,
                _generate_shard,
                shard,
                self._decisions[worker],
                stage_one_generator,
                stage_two_generator,
                stage_one_params,
                stage_two_params,
                decisions,
                optimizer,
            )
        _, failures = join(futures)
        if failures:
            first = next(iter(failures.values()))
            raise DistributedGenerationError(failures) from first

    def clear(self):
        futures = {
            worker: self._pool.submit(worker, shard.clear)
            for worker, shard in self._shards.items()
        }
        _, failures = join(futures)
        if failures:
            first = next(iter(failures.values()))
            raise DistributedGenerationError(failures) from first

    def __len__(self):
        return len(self._order)

    def __repr__(self):
        return "DistributedScenarioProblems(stage=%s, %d/%d generated, workers=%s)" % (
            self.stage,
            self.num_subproblems(),
            self.num_scenarios(),
            self.workers,
        )
