import sys

from treepush.main import main

sys.exit(main())
