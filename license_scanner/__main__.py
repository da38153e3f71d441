import sys

from license_scanner.main import main

sys.exit(main())
