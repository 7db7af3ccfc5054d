"""cpp-scaffold -- generates CMake + CPM C++ project skeletons.

The scaffolding core lives in :mod:`cpp_scaffold.scaffolder`; packaging and
persistence of generated archives in :mod:`cpp_scaffold.service` and
:mod:`cpp_scaffold.store`.
"""

__version__ = "0.1.0"
