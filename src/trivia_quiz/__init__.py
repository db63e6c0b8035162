"""Subject trivia quiz: session engine, question selection and progress tracking."""

__version__ = "0.1.0"
