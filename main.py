#!/usr/bin/env python3
"""Demo entry point for the trivia quiz."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from trivia_quiz.game import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
