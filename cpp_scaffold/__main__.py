import sys

from cpp_scaffold.cli import main

sys.exit(main())
