""" Unittest TestSuite -> Popcorn Query preprocessing steps """
import unittest
import logging
from popcorn_assistant.utilities import query_preprocessing
# set up logging for this test file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
# logger - query preprocessing
logger = logging.getLogger("TestQueryPreprocessing")


# TestSuite - Query Preprocessing
class TestQueryPreprocessing(unittest.TestCase):
    """Test suite for query_preprocessing helpers."""

    # test - split into words corpus
    def test_split_text_into_words_corpus(self):
        """Test punctuation is dropped and ranges, ratings and decades survive."""
        logger.info(f"Running test_split_text_into_words_corpus")
        out = query_preprocessing.split_text_into_words_corpus("Comedies, 2010–2015, rated 7+ from the 90's?")
        self.assertEqual(out, ["comedies", "2010-2015", "rated", "7+", "from", "the", "90's"])
        self.assertEqual(query_preprocessing.split_text_into_words_corpus(None), [])

    # test - year check
    def test_is_four_digit_year(self):
        logger.info(f"Running test_is_four_digit_year")
        self.assertTrue(query_preprocessing.is_four_digit_year("1999"))
        self.assertFalse(query_preprocessing.is_four_digit_year("1899"))
        self.assertFalse(query_preprocessing.is_four_digit_year("20x0"))

    # test - safe number parsing
    def test_parse_numbers_safe(self):
        """Test floats, ints and number words parse, junk gives None."""
        logger.info(f"Running test_parse_numbers_safe")
        self.assertEqual(query_preprocessing.parse_float_safe("7.5"), 7.5)
        self.assertEqual(query_preprocessing.parse_float_safe("8+"), 8.0)
        self.assertIsNone(query_preprocessing.parse_float_safe("high"))
        self.assertIsNone(query_preprocessing.parse_float_safe(True))
        self.assertEqual(query_preprocessing.parse_int_safe("twelve"), 12)
        self.assertEqual(query_preprocessing.parse_int_safe("7.9"), 7)
        self.assertIsNone(query_preprocessing.parse_int_safe(None))

    # test - year from catalog dates
    def test_extract_year_from_text(self):
        logger.info(f"Running test_extract_year_from_text")
        self.assertEqual(query_preprocessing.extract_year_from_text("2012-05-04"), 2012)
        self.assertEqual(query_preprocessing.extract_year_from_text("released in 1994"), 1994)
        self.assertEqual(query_preprocessing.extract_year_from_text(""), 0)

    # test - explicit counts
    def test_get_count_from_text(self):
        """Test explicit counts are found and years are never counts."""
        logger.info(f"Running test_get_count_from_text")
        self.assertEqual(query_preprocessing.get_count_from_text("top five thrillers"), 5)
        self.assertEqual(query_preprocessing.get_count_from_text("3 movies like Alien"), 3)
        self.assertEqual(query_preprocessing.get_count_from_text("recommend me 7"), 7)
        self.assertIsNone(query_preprocessing.get_count_from_text("2015 movies"))
        self.assertIsNone(query_preprocessing.get_count_from_text("funny films"))

    # test - code fences
    def test_strip_code_fences(self):
        logger.info(f"Running test_strip_code_fences")
        self.assertEqual(query_preprocessing.strip_code_fences('```json\n{"genre": "drama"}\n```'), '{"genre": "drama"}')
        self.assertEqual(query_preprocessing.strip_code_fences("no object here"), "")
        self.assertEqual(query_preprocessing.strip_code_fences(None), "")


# add the standard unittest entry point
if __name__ == "__main__":
    unittest.main(verbosity=2)
