import sys

from grid_shooter.main import main

sys.exit(main())
