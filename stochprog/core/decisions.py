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

"""Registries of the decision variables declared at each stage.

A :py:class:`Decisions` object records every decision a stage generator
declares, together with (optionally) the values the decision has been
fixed to.  The same object is handed to the first-stage generator when
the shared first-stage model is built and to both generators when each
wait-and-see subproblem is built, so a decision that has been fixed
(e.g., to a first-stage solution) is materialized as a fixed
:py:class:`Var` in every subproblem generated afterwards.
"""

import logging
from collections.abc import Mapping

from pyomo.environ import Var, value

logger = logging.getLogger('stochprog.core')


class Decision(object):
    """The record of one declared decision (a, possibly indexed, Var)"""

    __slots__ = ('name', 'stage', 'index', 'var_kwds', '_values')

    def __init__(self, name, stage, index=(), var_kwds=None):
        self.name = name
        self.stage = stage
        self.index = tuple(index)
        self.var_kwds = dict(var_kwds or {})
        self._values = None

    @property
    def fixed(self):
        return self._values is not None

    @property
    def values(self):
        """The fixed values, as a dict mapping Var index to value (the
        index of a scalar decision is None), or None if not fixed"""
        if self._values is None:
            return None
        return dict(self._values)

    def copy(self):
        ans = Decision(self.name, self.stage, self.index, self.var_kwds)
        if self._values is not None:
            ans._values = dict(self._values)
        return ans

    def __repr__(self):
        return "Decision(%r, stage=%s%s)" % (
            self.name,
            self.stage,
            ", fixed" if self.fixed else "",
        )


class Decisions(object):
    """An ordered, append-only registry of the decisions of one stage.

    Generators declare decisions through :py:meth:`declare` instead of
    adding :py:class:`Var` components to the model directly::

        def first_stage(model, decisions, params):
            decisions.declare(model, 'x', params.crops, domain=NonNegativeReals)
            ...

    Declaring a name that is already registered reuses the existing
    record; records are never removed.

    """

    def __init__(self, stage=1):
        self.stage = stage
        self._decisions = {}

    def declare(self, model, name, *index, **kwds):
        """Declare the decision ``name`` on ``model`` and return the Var.

        Positional arguments after the name are the index sets of the
        Var and keyword arguments are passed to the Var constructor.
        If the decision has been fixed in this registry, the new Var is
        fixed to the recorded values.
        """
        record = self._decisions.get(name)
        if record is None:
            record = Decision(name, self.stage, index, kwds)
            self._decisions[name] = record
            logger.debug("Registered stage %s decision '%s'", self.stage, name)
        var = Var(*index, **kwds)
        model.add_component(name, var)
        if record.fixed:
            for idx, val in record._values.items():
                var[idx].fix(val)
        return var

    def variable(self, model, name):
        """Return the Var that realizes decision ``name`` on ``model``"""
        if name not in self._decisions:
            raise KeyError(
                "No stage %s decision named '%s' has been declared"
                % (self.stage, name)
            )
        var = model.component(name)
        if var is None:
            raise KeyError(
                "Decision '%s' is not declared on model '%s'" % (name, model.name)
            )
        return var

    def fix(self, name, values):
        """Record fixed values for a decision.

        ``values`` is a scalar for scalar decisions, or a mapping from
        index to value for indexed ones.  Only subproblems generated
        after the call see the fixed values.
        """
        record = self[name]
        if isinstance(values, Mapping):
            record._values = dict(values)
        else:
            record._values = {None: values}

    def unfix(self, name):
        self[name]._values = None

    def fix_from(self, model):
        """Fix every registered decision to its current value on ``model``"""
        for name, record in self._decisions.items():
            var = self.variable(model, name)
            vals = {}
            for idx, vardata in var.items():
                if vardata.value is None:
                    raise ValueError(
                        "Cannot fix decision '%s': %s has no value"
                        % (name, vardata.name)
                    )
                vals[idx] = value(vardata)
            record._values = vals

    def is_fixed(self, name):
        return self[name].fixed

    def names(self):
        return list(self._decisions)

    def copy(self):
        ans = Decisions(self.stage)
        ans.update(self)
        return ans

    def update(self, other):
        """Bring this registry in line with ``other``.

        Decisions missing here are appended (in the order of ``other``)
        and the fixed values of every decision in ``other`` replace the
        local ones.
        """
        for name, record in other._decisions.items():
            mine = self._decisions.get(name)
            if mine is None:
                self._decisions[name] = record.copy()
            elif record._values is None:
                mine._values = None
            else:
                mine._values = dict(record._values)

    def __getitem__(self, name):
        try:
            return self._decisions[name]
        except KeyError:
            raise KeyError(
                "No stage %s decision named '%s' has been declared"
                % (self.stage, name)
            ) from None

    def __contains__(self, name):
        return name in self._decisions

    def __iter__(self):
        return iter(self._decisions.values())

    def __len__(self):
        return len(self._decisions)

    def __repr__(self):
        return "Decisions(stage=%s, %s)" % (self.stage, self.names())


class DecisionStore(object):
    """The :py:class:`Decisions` of every stage of a program, keyed by
    stage number (1..N)"""

    def __init__(self, num_stages):
        self.num_stages = num_stages
        self._stages = {s: Decisions(s) for s in range(1, num_stages + 1)}

    def __getitem__(self, stage):
        try:
            return self._stages[stage]
        except KeyError:
            raise KeyError(
                "Stage %s not in range 1 to %s." % (stage, self.num_stages)
            ) from None

    def __iter__(self):
        return iter(self._stages.values())

    def __len__(self):
        return len(self._stages)
