"""QuranKi - spaced-repetition review core for memorizing the Quran."""
