"""Run with: python -m waveinterference"""
import sys

from waveinterference.main import main

sys.exit(main())
