import sys

from kenyadeals.cli import main

sys.exit(main())
