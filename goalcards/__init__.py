"""goalcards - spaced-repetition scheduling for goal-based flashcard study."""

__version__ = "0.1.0"
