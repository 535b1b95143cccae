import sys

from webapk_builder.cli import main

sys.exit(main())
