import sys

from askservice.main import main

sys.exit(main())
