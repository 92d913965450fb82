import sys

from asa_expander.cli import main

sys.exit(main())
