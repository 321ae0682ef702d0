import sys

from patient_risk.main import main

sys.exit(main())
