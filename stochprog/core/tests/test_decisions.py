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

import pyomo.common.unittest as unittest
from pyomo.environ import ConcreteModel, NonNegativeReals, Var

from stochprog.core.decisions import Decision, Decisions, DecisionStore


class TestDecisions(unittest.TestCase):
    def test_declare(self):
        d = Decisions(1)
        m = ConcreteModel()
        x = d.declare(m, 'x', ['a', 'b'], domain=NonNegativeReals)
        self.assertIs(m.x, x)
        self.assertIsInstance(x, Var)
        self.assertEqual(set(x.keys()), {'a', 'b'})
        self.assertIn('x', d)
        self.assertEqual(len(d), 1)
        self.assertEqual(d.names(), ['x'])
        self.assertFalse(d.is_fixed('x'))
        self.assertEqual(d['x'].stage, 1)

    def test_declare_again_reuses_record(self):
        d = Decisions(1)
        d.declare(ConcreteModel(), 'x')
        record = d['x']
        m = ConcreteModel()
        d.declare(m, 'x')
        self.assertIs(d['x'], record)
        self.assertEqual(len(d), 1)
        self.assertFalse(m.x.fixed)

    def test_declare_order(self):
        d = Decisions(1)
        m = ConcreteModel()
        d.declare(m, 'z')
        d.declare(m, 'a')
        self.assertEqual(d.names(), ['z', 'a'])
        self.assertEqual([r.name for r in d], ['z', 'a'])

    def test_fixed_scalar(self):
        d = Decisions(1)
        d.declare(ConcreteModel(), 'x')
        d.fix('x', 4.5)
        self.assertTrue(d.is_fixed('x'))
        self.assertEqual(d['x'].values, {None: 4.5})
        m = ConcreteModel()
        d.declare(m, 'x')
        self.assertTrue(m.x.fixed)
        self.assertEqual(m.x.value, 4.5)

    def test_fixed_indexed(self):
        d = Decisions(1)
        d.declare(ConcreteModel(), 'x', [1, 2])
        d.fix('x', {1: 10, 2: 20})
        m = ConcreteModel()
        d.declare(m, 'x', [1, 2])
        self.assertTrue(m.x[1].fixed)
        self.assertEqual(m.x[2].value, 20)

        d.unfix('x')
        self.assertFalse(d.is_fixed('x'))
        self.assertIsNone(d['x'].values)
        m = ConcreteModel()
        d.declare(m, 'x', [1, 2])
        self.assertFalse(m.x[1].fixed)

    def test_fix_from(self):
        d = Decisions(1)
        m = ConcreteModel()
        d.declare(m, 'x', [1, 2])
        m.x[1] = 3
        with self.assertRaisesRegex(ValueError, r"x\[2\] has no value"):
            d.fix_from(m)
        self.assertFalse(d.is_fixed('x'))
        m.x[2] = 4
        d.fix_from(m)
        self.assertEqual(d['x'].values, {1: 3, 2: 4})

    def test_variable(self):
        d = Decisions(1)
        m = ConcreteModel()
        d.declare(m, 'x')
        self.assertIs(d.variable(m, 'x'), m.x)
        with self.assertRaisesRegex(KeyError, "No stage 1 decision named 'y'"):
            d.variable(m, 'y')
        with self.assertRaisesRegex(KeyError, "not declared on model"):
            d.variable(ConcreteModel(), 'x')

    def test_unknown_decision(self):
        d = Decisions(2)
        with self.assertRaisesRegex(KeyError, "No stage 2 decision named 'x'"):
            d.fix('x', 1)

    def test_copy_and_update(self):
        d = Decisions(1)
        d.declare(ConcreteModel(), 'x')
        d.fix('x', 1)
        c = d.copy()
        self.assertEqual(c.names(), ['x'])
        self.assertIsNot(c['x'], d['x'])
        self.assertEqual(c['x'].values, {None: 1})

        d.declare(ConcreteModel(), 'y')
        d.fix('x', 2)
        c.update(d)
        self.assertEqual(c.names(), ['x', 'y'])
        self.assertEqual(c['x'].values, {None: 2})

        d.unfix('x')
        c.update(d)
        self.assertFalse(c.is_fixed('x'))

    def test_decision_repr(self):
        r = Decision('x', 1)
        self.assertEqual(repr(r), "Decision('x', stage=1)")
        r._values = {None: 0}
        self.assertEqual(repr(r), "Decision('x', stage=1, fixed)")


class TestDecisionStore(unittest.TestCase):
    def test_stages(self):
        store = DecisionStore(2)
        self.assertEqual(len(store), 2)
        self.assertEqual([d.stage for d in store], [1, 2])
        self.assertIs(store[1], store[1])
        with self.assertRaisesRegex(KeyError, "Stage 3 not in range 1 to 2"):
            store[3]
        with self.assertRaisesRegex(KeyError, "Stage 0 not in range 1 to 2"):
            store[0]


if __name__ == "__main__":
    unittest.main()
