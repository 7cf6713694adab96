import sys

from postman.cli import main

sys.exit(main())
