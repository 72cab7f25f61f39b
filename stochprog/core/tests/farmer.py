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

"""A two-stage farmer planning model used throughout the tests.

The farmer splits 500 acres between wheat, corn and sugar beets before
the yields are known (first stage), then buys or sells crops once the
yields are revealed (second stage).
"""

from pyomo.environ import (
    Constraint,
    Expression,
    NonNegativeReals,
    Objective,
    Var,
    minimize,
)

from stochprog.core.scenario import Scenario

CROPS = ['wheat', 'corn', 'beets']

FIRST_STAGE_PARAMS = {
    'crops': CROPS,
    'total_land': 500,
    'planting_cost': {'wheat': 150, 'corn': 230, 'beets': 260},
}

SECOND_STAGE_PARAMS = {
    'crops': CROPS,
    'purchase_price': {'wheat': 238, 'corn': 210},
    'sale_price': {'wheat': 170, 'corn': 150, 'beets': 36},
    'excess_beet_price': 10,
    'beet_quota': 6000,
    'required': {'wheat': 200, 'corn': 240, 'beets': 0},
}


def farmer_scenarios():
    return [
        Scenario(1 / 3, name='good', yields={'wheat': 3.0, 'corn': 3.6, 'beets': 24.0}),
        Scenario(1 / 3, name='average', yields={'wheat': 2.5, 'corn': 3.0, 'beets': 20.0}),
        Scenario(1 / 3, name='bad', yields={'wheat': 2.0, 'corn': 2.4, 'beets': 16.0}),
    ]


def first_stage(model, decisions, params):
    crops = params['crops']
    x = decisions.declare(model, 'x', crops, domain=NonNegativeReals)
    model.total_land = Constraint(
        expr=sum(x[c] for c in crops) <= params['total_land']
    )
    model.planting_cost = Expression(
        expr=sum(params['planting_cost'][c] * x[c] for c in crops)
    )
    return model


def second_stage(model, scenario, decisions, params):
    crops = params['crops']
    x = decisions.variable(model, 'x')
    purchased = list(params['purchase_price'])
    model.y = Var(purchased, domain=NonNegativeReals)
    model.w = Var(crops, domain=NonNegativeReals)
    model.w_excess = Var(domain=NonNegativeReals)

    def _balance(m, c):
        bought = m.y[c] if c in purchased else 0
        sold = m.w[c] + (m.w_excess if c == 'beets' else 0)
        return scenario.yields[c] * x[c] + bought - sold >= params['required'][c]

    model.balance = Constraint(crops, rule=_balance)
    model.beet_quota = Constraint(expr=model.w['beets'] <= params['beet_quota'])
    model.cost = Objective(
        expr=model.planting_cost
        + sum(params['purchase_price'][c] * model.y[c] for c in purchased)
        - sum(params['sale_price'][c] * model.w[c] for c in crops)
        - params['excess_beet_price'] * model.w_excess,
        sense=minimize,
    )
    return model
