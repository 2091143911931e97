"""python -m appshot 入口."""

import sys

from appshot.main import main

sys.exit(main())
