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

import math
from collections.abc import Mapping
from types import MappingProxyType


class Scenario(object):
    """One realization of the uncertain data of a stochastic program.

    A scenario carries a probability weight and an arbitrary user
    payload.  The payload is either passed explicitly through ``data``
    or given as keyword fields, in which case it is stored as a
    read-only mapping whose keys are also available as attributes::

        >>> s = Scenario(1/3, yields={'wheat': 3.0, 'corn': 3.6})
        >>> s.yields['wheat']
        3.0

    Scenarios are read-only once created.

    Parameters
    ----------
    probability: float
        The probability of the scenario, in the interval [0, 1]

    data: object, optional
        The user payload.  Mutually exclusive with keyword fields.

    name: str, optional
        A label used when reporting on the scenario.

    """

    __slots__ = ('_probability', '_data', '_name')

    def __init__(self, probability=1.0, data=None, name=None, **fields):
        try:
            p = float(probability)
        except (TypeError, ValueError):
            raise TypeError(
                "Scenario probability must be a real number (received %s)"
                % (type(probability).__name__,)
            )
        if math.isnan(p) or p < 0 or p > 1:
            raise ValueError(
                "Scenario probability must lie in [0, 1] (received %s)" % (p,)
            )
        if fields:
            if data is not None:
                raise ValueError(
                    "Scenario payload may be given either as 'data' or as "
                    "keyword fields, not both"
                )
            data = MappingProxyType(dict(fields))
        object.__setattr__(self, '_probability', p)
        object.__setattr__(self, '_data', data)
        object.__setattr__(self, '_name', name)

    @property
    def probability(self):
        return self._probability

    @property
    def data(self):
        return self._data

    @property
    def name(self):
        return self._name

    def __getitem__(self, key):
        if not isinstance(self._data, Mapping):
            raise TypeError(
                "Scenario %s payload of type %s is not subscriptable"
                % (self._label(), type(self._data).__name__)
            )
        return self._data[key]

    def __getattr__(self, name):
        # Only reached for names that are not slots or properties
        data = object.__getattribute__(self, '_data')
        if isinstance(data, Mapping) and name in data:
            return data[name]
        raise AttributeError(
            "'%s' object has no attribute '%s'" % (type(self).__name__, name)
        )

    def __setattr__(self, name, value):
        raise AttributeError("Scenario objects are read-only")

    def __delattr__(self, name):
        raise AttributeError("Scenario objects are read-only")

    def __reduce__(self):
        # MappingProxyType cannot be pickled
        fields = isinstance(self._data, MappingProxyType)
        data = dict(self._data) if fields else self._data
        return (_rebuild_scenario, (self._probability, data, self._name, fields))

    def _label(self):
        return repr(self._name) if self._name is not None else '<unnamed>'

    def __repr__(self):
        if self._name is None:
            return "Scenario(probability=%r)" % (self._probability,)
        return "Scenario(%r, probability=%r)" % (self._name, self._probability)


def _rebuild_scenario(probability, data, name, fields):
    if fields:
        return Scenario(probability, name=name, **data)
    return Scenario(probability, data=data, name=name)


def probability(scenario):
    """Return the probability of a scenario"""
    return scenario.probability


def stage_probability(scenarios):
    """Return the total probability mass of a collection of scenarios.

    Summation is done with :py:func:`math.fsum`, so equal shares such as
    three scenarios of probability 1/3 add up to exactly one.
    """
    return math.fsum(s.probability for s in scenarios)
