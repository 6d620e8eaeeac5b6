import sys

from form_builder.cli import main

sys.exit(main())
