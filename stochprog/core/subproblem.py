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

from pyomo.environ import ConcreteModel, Objective, SolverFactory, value

from stochprog.common.errors import GenerationError

logger = logging.getLogger('stochprog.core')


def resolve_optimizer(optimizer):
    """Return a solver object for an optimizer handle.

    Solver names are resolved through :py:class:`SolverFactory`, so each
    caller gets its own solver instance.  Any other handle is returned
    unchanged.
    """
    if isinstance(optimizer, str):
        return SolverFactory(optimizer)
    return optimizer


class WaitAndSeeSubproblem(object):
    """The deterministic subproblem obtained by fixing one scenario.

    Attributes
    ----------
    model: ConcreteModel
        The materialized Pyomo model (first- and second-stage components)
    scenario: Scenario
        The realization this subproblem was generated for
    decisions: Decisions
        The (shared) first-stage decision registry used to build it
    optimizer:
        The solver handle bound to the subproblem, or None

    """

    __slots__ = ('model', 'scenario', 'decisions', 'optimizer')

    def __init__(self, model, scenario, decisions, optimizer=None):
        self.model = model
        self.scenario = scenario
        self.decisions = decisions
        self.optimizer = optimizer

    @property
    def probability(self):
        return self.scenario.probability

    def solve(self, **kwds):
        """Solve the subproblem with the bound optimizer.

        Keyword arguments are passed through to the solver's ``solve``
        method, and its results object is returned.
        """
        if self.optimizer is None:
            raise GenerationError(
                "No optimizer bound to the wait-and-see subproblem '%s'. "
                "Consider StochasticProgram.set_optimizer()." % (self.model.name,)
            )
        return self.optimizer.solve(self.model, **kwds)

    def objective_value(self):
        """Return the value of the (single) active objective"""
        objs = list(self.model.component_data_objects(Objective, active=True))
        if len(objs) != 1:
            raise ValueError(
                "Subproblem '%s' has %d active objectives; expected exactly one"
                % (self.model.name, len(objs))
            )
        return value(objs[0])

    def __repr__(self):
        return "WaitAndSeeSubproblem(%r)" % (self.scenario,)


def wait_and_see(
    stage_one_generator,
    stage_two_generator,
    stage_one_params,
    stage_two_params,
    scenario,
    decisions,
    optimizer,
):
    """Materialize the wait-and-see subproblem of one scenario.

    The first-stage generator is run on a fresh model with the shared
    first-stage ``decisions`` (so decisions that have been fixed come
    out as fixed Vars), then the second-stage generator adds the
    scenario-dependent components.  Neither the scenario nor the
    generators are modified.

    Returns
    -------
    WaitAndSeeSubproblem

    """
    if scenario.name is None:
        name = 'wait_and_see'
    else:
        name = 'wait_and_see[%s]' % (scenario.name,)
    model = ConcreteModel(name=name)
    stage_one_generator(model, decisions, stage_one_params)
    stage_two_generator(model, scenario, decisions, stage_two_params)
    logger.debug("Generated wait-and-see subproblem %s", name)
    return WaitAndSeeSubproblem(
        model, scenario, decisions, resolve_optimizer(optimizer)
    )
