import sys

from tradebot.main import main

sys.exit(main())
