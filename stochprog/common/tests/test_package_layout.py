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

import importlib
import os

import pyomo.common.dependencies as dependencies
import pyomo.common.unittest as unittest

import stochprog

parameterized, param_available = dependencies.attempt_import('parameterized')
parameterized = parameterized.parameterized

STOCHPROG_DIR = os.path.dirname(os.path.abspath(stochprog.__file__))

# Test directories are deliberately not packages
_NON_MODULE_DIR_NAMES = {'tests'}


def _find_modules():
    for path, subdirs, files in os.walk(STOCHPROG_DIR):
        subdirs[:] = [d for d in subdirs if d not in _NON_MODULE_DIR_NAMES]
        pkg = os.path.relpath(path, os.path.dirname(STOCHPROG_DIR))
        for fname in files:
            if fname.endswith('.py') and fname != '__init__.py':
                yield pkg.replace(os.path.sep, '.') + '.' + fname[:-3]


modules = sorted(_find_modules())


class TestPackageLayout(unittest.TestCase):
    def test_for_init_files(self):
        fail = []
        for path, subdirs, files in os.walk(STOCHPROG_DIR):
            try:
                subdirs.remove('__pycache__')
            except ValueError:
                pass
            if os.path.basename(path) in _NON_MODULE_DIR_NAMES:
                if '__init__.py' in files:
                    fail.append(path[1 + len(STOCHPROG_DIR) :])
                subdirs[:] = []
                continue
            if '__init__.py' not in files:
                fail.append(path[1 + len(STOCHPROG_DIR) :])
        if fail:
            self.fail(
                "Directories with an unexpected package layout:\n\t"
                + "\n\t".join(sorted(fail))
            )

    @parameterized.expand(modules)
    def test_module_import(self, module):
        importlib.import_module(module)


if __name__ == "__main__":
    unittest.main()
