import sys

from miniwm.main import main

sys.exit(main())
