"""
Allow running the package directly: python -m escapeview
"""
import sys

from .cli import main

sys.exit(main())
