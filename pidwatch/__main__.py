import sys

from pidwatch.monitor_app import main

sys.exit(main())
