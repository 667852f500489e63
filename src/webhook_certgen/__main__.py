"""Run the certificate job with ``python -m webhook_certgen``."""

import sys

from webhook_certgen.job import main

sys.exit(main())
