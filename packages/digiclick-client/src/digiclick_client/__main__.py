import sys

from digiclick_client.cli import main

sys.exit(main())
