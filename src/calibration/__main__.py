"""
UBI Simulator CLI
=================

Usage::

    # Calibrate taxes for one UBI level
    python -m calibration --ubi 1000

    # Run the predefined scenario suite
    python -m calibration

See ``python -m calibration --help`` for every option.
"""

from __future__ import annotations

from calibration.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
