import sys

from neuroperf.cli import main

sys.exit(main())
